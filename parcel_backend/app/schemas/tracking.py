"""
Tracking Pydantic schemas.

tracking_id and status are checked by the tracking service so that a
missing value is reported as a 400 rather than a schema error.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class TrackingEventCreate(BaseModel):
    tracking_id: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    note: Optional[str] = Field(None, max_length=500)


class TrackingEventResponse(BaseModel):
    id: int
    tracking_id: str
    status: str
    location: Optional[str]
    note: Optional[str]
    timestamp: datetime

    class Config:
        from_attributes = True


class TrackingAppended(BaseModel):
    success: bool = True
    inserted_id: int
