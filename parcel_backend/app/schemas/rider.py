"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from parcel_backend.app.models.rider_enums import RiderStatus, WorkStatus


class RiderApplication(BaseModel):
    """Schema for a rider application."""
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    district: str = Field(..., min_length=1, max_length=100)


class RiderResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str]
    district: str
    status: RiderStatus
    work_status: WorkStatus
    created_at: datetime

    class Config:
        from_attributes = True


class RiderStatusUpdate(BaseModel):
    """Admin decision on a rider; email identifies the user to promote."""
    status: RiderStatus
    work_status: Optional[WorkStatus] = None
    email: Optional[str] = Field(None, max_length=255)


class RiderStatusResult(BaseModel):
    rider_updated: int
    role_updated: int


class RiderRepair(BaseModel):
    rider_id: int
    previous: WorkStatus
    corrected: WorkStatus


class ReconciliationReport(BaseModel):
    riders_checked: int
    repairs: list[RiderRepair]
