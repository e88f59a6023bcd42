"""
Rider status enumerations.
"""

import enum


class RiderStatus(str, enum.Enum):
    """Application / approval state of a rider."""
    PENDING = "pending"
    ACTIVE = "active"
    DEACTIVE = "deactive"


class WorkStatus(str, enum.Enum):
    """
    Current availability of a rider.

    FREE: no open parcel
    IN_DELIVERY: assigned a parcel not yet picked up
    BUSY: carrying a picked-up parcel
    """
    FREE = "free"
    BUSY = "busy"
    IN_DELIVERY = "in_delivery"
