"""
Tracking API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status

from parcel_backend.app.schemas.tracking import (
    TrackingEventCreate, TrackingEventResponse, TrackingAppended
)
from parcel_backend.app.services.tracking import TrackingService
from parcel_backend.app.api.v1.providers import get_tracking_service

router = APIRouter(prefix="/trackings", tags=["Tracking"])


@router.post("", response_model=TrackingAppended, status_code=status.HTTP_201_CREATED)
async def append_tracking_event(
    event_data: TrackingEventCreate,
    service: TrackingService = Depends(get_tracking_service)
):
    """Append a status note; tracking_id and status are required."""
    event = await service.append(
        event_data.tracking_id,
        event_data.status,
        location=event_data.location,
        note=event_data.note
    )
    return TrackingAppended(inserted_id=event.id)


@router.get("/{tracking_id}", response_model=List[TrackingEventResponse])
async def get_tracking_history(
    tracking_id: str = Path(..., description="Tracking ID"),
    service: TrackingService = Depends(get_tracking_service)
):
    """Events for a shipment, oldest first. Unknown ids return an empty list."""
    events = await service.history(tracking_id)
    return [TrackingEventResponse.model_validate(e) for e in events]
