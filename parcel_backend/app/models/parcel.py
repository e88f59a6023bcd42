"""
Parcel database model.

Customers book parcels; riders carry them through the delivery lifecycle.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.parcel_enums import (
    DeliveryStatus, PaymentStatus, CashoutStatus, ParcelType
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Parcel(Base):
    """
    Parcel model.

    assigned_rider_id, assigned_rider_name and assigned_rider_email are either
    all NULL or all set; the lifecycle service writes them together.
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Logical shipment identifier shared with the tracking log
    tracking_id = Column(String(40), unique=True, nullable=False, index=True)

    # Ownership
    created_by = Column(String(255), nullable=False, index=True)

    # Booking details
    title = Column(String(200), nullable=True)
    parcel_type = Column(Enum(ParcelType), nullable=True)
    weight_kg = Column(Float, nullable=True)
    sender_name = Column(String(200), nullable=True)
    sender_district = Column(String(100), nullable=True)
    receiver_name = Column(String(200), nullable=True)
    receiver_district = Column(String(100), nullable=True)
    delivery_cost = Column(Float, nullable=True)

    # Status
    delivery_status = Column(Enum(DeliveryStatus), default=DeliveryStatus.PENDING, nullable=False, index=True)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False, index=True)
    cashout_status = Column(Enum(CashoutStatus), default=CashoutStatus.NONE, nullable=False)
    cashed_out_at = Column(DateTime(timezone=True), nullable=True)

    # Assignment
    assigned_rider_id = Column(Integer, nullable=True, index=True)
    assigned_rider_name = Column(String(200), nullable=True)
    assigned_rider_email = Column(String(255), nullable=True, index=True)

    # Optimistic concurrency counter, bumped by every lifecycle write
    version = Column(Integer, default=1, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking_id='{self.tracking_id}', delivery_status='{self.delivery_status.value}')>"
