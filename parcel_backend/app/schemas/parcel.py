"""
Parcel Pydantic schemas.

Defines request and response models for parcel booking and the delivery
lifecycle. Request bodies accept the camelCase keys sent by the web client.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Union
from parcel_backend.app.models.parcel_enums import (
    DeliveryStatus, PaymentStatus, CashoutStatus, ParcelType
)


class ParcelCreate(BaseModel):
    """Schema for booking a new parcel."""
    created_by: str = Field(..., min_length=3, max_length=255, description="Customer email")
    tracking_id: Optional[str] = Field(None, min_length=1, max_length=40, description="Client supplied tracking id")
    title: Optional[str] = Field(None, max_length=200)
    parcel_type: Optional[ParcelType] = None
    weight_kg: Optional[float] = Field(None, gt=0)
    sender_name: Optional[str] = Field(None, max_length=200)
    sender_district: Optional[str] = Field(None, max_length=100)
    receiver_name: Optional[str] = Field(None, max_length=200)
    receiver_district: Optional[str] = Field(None, max_length=100)
    delivery_cost: Optional[float] = Field(None, ge=0)


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: int
    tracking_id: str
    created_by: str
    title: Optional[str]
    parcel_type: Optional[ParcelType]
    weight_kg: Optional[float]
    sender_name: Optional[str]
    sender_district: Optional[str]
    receiver_name: Optional[str]
    receiver_district: Optional[str]
    delivery_cost: Optional[float]
    delivery_status: DeliveryStatus
    payment_status: PaymentStatus
    cashout_status: CashoutStatus
    cashed_out_at: Optional[datetime]
    assigned_rider_id: Optional[int]
    assigned_rider_name: Optional[str]
    assigned_rider_email: Optional[str]
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ParcelCreateResponse(BaseModel):
    """Result of create-or-find: created is False when tracking_id already existed."""
    created: bool
    parcel: ParcelResponse


class RiderAssignment(BaseModel):
    """Body of the assign call."""
    rider_id: Union[int, str] = Field(..., alias="riderId")
    rider_name: str = Field(..., min_length=1, max_length=200, alias="riderName")
    assigned_rider_email: str = Field(..., min_length=3, max_length=255, alias="riderEmail")

    class Config:
        populate_by_name = True


class RiderAction(BaseModel):
    """Body of the pickup and deliver calls."""
    rider_id: Union[int, str] = Field(..., alias="riderId")
    message: Optional[str] = Field(None, max_length=500)

    class Config:
        populate_by_name = True


class AssignmentResult(BaseModel):
    parcel_updated: int
    rider_updated: int
    parcel: ParcelResponse


class TransitionResult(BaseModel):
    """Rows changed in each store; 0 means that side was a no-op."""
    success: bool = True
    parcel_updated: int
    rider_updated: int


class CashoutResult(BaseModel):
    matched_count: int
    modified_count: int


class DeleteResult(BaseModel):
    deleted_count: int
