"""
Parcel API Endpoints.

Booking, lookup and the delivery lifecycle (assign, pickup, deliver,
cashout, delete).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status, Query, Path

from parcel_backend.app.core.identifiers import parse_id
from parcel_backend.app.models.parcel_enums import DeliveryStatus, PaymentStatus
from parcel_backend.app.schemas.parcel import (
    ParcelCreate, ParcelResponse, ParcelCreateResponse,
    RiderAssignment, RiderAction, AssignmentResult,
    TransitionResult, CashoutResult, DeleteResult
)
from parcel_backend.app.services.lifecycle import ParcelLifecycleService
from parcel_backend.app.api.v1.providers import get_lifecycle_service

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.post("", response_model=ParcelCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    response: Response,
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """
    Book a parcel.

    Returns 201 with the new parcel, or 200 with the existing parcel when
    the tracking_id is already known.
    """
    parcel, created = await service.create(parcel_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return ParcelCreateResponse(created=created, parcel=ParcelResponse.model_validate(parcel))


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    email: Optional[str] = Query(None, description="Filter by creator email"),
    payment_status: Optional[PaymentStatus] = Query(None),
    delivery_status: Optional[DeliveryStatus] = Query(None),
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """List parcels, newest first."""
    parcels = await service.list(email, payment_status, delivery_status)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    parcel = await service.get(parse_id(parcel_id, "parcel_id"))
    return ParcelResponse.model_validate(parcel)


@router.delete("/{parcel_id}", response_model=DeleteResult)
async def delete_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """Hard delete. Related payments and tracking events are kept."""
    deleted = await service.delete(parse_id(parcel_id, "parcel_id"))
    return DeleteResult(deleted_count=deleted)


@router.patch("/{parcel_id}/assign", response_model=AssignmentResult)
async def assign_rider(
    parcel_id: str = Path(..., description="Parcel ID"),
    assignment: RiderAssignment = ...,
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """
    Assign a rider to a pending parcel.

    Moves the parcel to in_transit and the rider to in_delivery.
    Returns 409 if the parcel is not pending.
    """
    parcel, parcel_updated, rider_updated = await service.assign(
        parse_id(parcel_id, "parcel_id"),
        parse_id(assignment.rider_id, "riderId"),
        assignment.rider_name,
        assignment.assigned_rider_email,
    )
    return AssignmentResult(
        parcel_updated=parcel_updated,
        rider_updated=rider_updated,
        parcel=ParcelResponse.model_validate(parcel)
    )


@router.patch("/{parcel_id}/pickup", response_model=TransitionResult)
async def pickup_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    action: RiderAction = ...,
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """Rider picked the parcel up. Zero counts mean nothing changed."""
    return await service.pickup(
        parse_id(parcel_id, "parcel_id"),
        parse_id(action.rider_id, "riderId")
    )


@router.patch("/{parcel_id}/deliver", response_model=TransitionResult)
async def deliver_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    action: RiderAction = ...,
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """Rider delivered the parcel; an optional message goes to the tracking log."""
    return await service.deliver(
        parse_id(parcel_id, "parcel_id"),
        parse_id(action.rider_id, "riderId"),
        message=action.message
    )


@router.patch("/{parcel_id}/cashout", response_model=CashoutResult)
async def cashout_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    return await service.cashout(parse_id(parcel_id, "parcel_id"))
