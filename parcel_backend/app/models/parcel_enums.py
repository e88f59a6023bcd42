"""
Parcel status enumerations.
"""

import enum


class DeliveryStatus(str, enum.Enum):
    """
    Delivery lifecycle of a parcel.

    Status flow (forward only):
        PENDING -> IN_TRANSIT -> PICKED_UP -> DELIVERED
    SERVICE_CENTER_DELIVERED is an alternate completion set by the back office.
    """
    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"
    SERVICE_CENTER_DELIVERED = "service_center_delivered"


# Transition graph: action -> (required current status, resulting status)
LIFECYCLE_TRANSITIONS = {
    "assign": (DeliveryStatus.PENDING, DeliveryStatus.IN_TRANSIT),
    "pickup": (DeliveryStatus.IN_TRANSIT, DeliveryStatus.PICKED_UP),
    "deliver": (DeliveryStatus.PICKED_UP, DeliveryStatus.DELIVERED),
}

OPEN_STATUSES = (DeliveryStatus.IN_TRANSIT, DeliveryStatus.PICKED_UP)
COMPLETED_STATUSES = (DeliveryStatus.DELIVERED, DeliveryStatus.SERVICE_CENTER_DELIVERED)


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class CashoutStatus(str, enum.Enum):
    NONE = "none"
    CASHED_OUT = "cashed_out"


class ParcelType(str, enum.Enum):
    DOCUMENT = "document"
    NON_DOCUMENT = "non-document"
