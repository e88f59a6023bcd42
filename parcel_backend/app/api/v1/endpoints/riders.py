"""
Rider API Endpoints.

Rider applications, admin approval, availability lookups and the rider's
own task lists.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query, status

from parcel_backend.app.core.guards import require_admin, require_rider, enforce_own_email
from parcel_backend.app.core.identifiers import parse_id
from parcel_backend.app.models.rider_enums import RiderStatus
from parcel_backend.app.schemas.parcel import ParcelResponse
from parcel_backend.app.schemas.rider import (
    RiderApplication, RiderResponse, RiderStatusUpdate, RiderStatusResult
)
from parcel_backend.app.services.lifecycle import ParcelLifecycleService
from parcel_backend.app.services.rider_availability import RiderAvailabilityService
from parcel_backend.app.api.v1.providers import get_rider_service, get_lifecycle_service

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post("", response_model=RiderResponse, status_code=status.HTTP_201_CREATED)
async def apply_as_rider(
    application: RiderApplication,
    service: RiderAvailabilityService = Depends(get_rider_service)
):
    """Submit a rider application (status pending)."""
    rider = await service.apply(application)
    return RiderResponse.model_validate(rider)


@router.get("/pending", response_model=List[RiderResponse])
async def list_pending_riders(
    current_user: dict = Depends(require_admin),
    service: RiderAvailabilityService = Depends(get_rider_service)
):
    riders = await service.list_by_status(RiderStatus.PENDING)
    return [RiderResponse.model_validate(r) for r in riders]


@router.get("/active", response_model=List[RiderResponse])
async def list_active_riders(
    current_user: dict = Depends(require_admin),
    service: RiderAvailabilityService = Depends(get_rider_service)
):
    riders = await service.list_by_status(RiderStatus.ACTIVE)
    return [RiderResponse.model_validate(r) for r in riders]


@router.get("/active-deactive", response_model=List[RiderResponse])
async def list_active_and_deactive_riders(
    service: RiderAvailabilityService = Depends(get_rider_service)
):
    riders = await service.list_active_or_deactive()
    return [RiderResponse.model_validate(r) for r in riders]


@router.get("/available", response_model=List[RiderResponse])
async def list_available_riders(
    district: str = Query(..., description="District to search"),
    service: RiderAvailabilityService = Depends(get_rider_service)
):
    """Active riders in the district who are free to take a parcel."""
    riders = await service.list_available(district)
    return [RiderResponse.model_validate(r) for r in riders]


@router.get("/parcels", response_model=List[ParcelResponse])
async def list_rider_tasks(
    email: str = Query(..., description="Rider email"),
    current_user: dict = Depends(require_rider),
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    """Parcels the calling rider still has to pick up or deliver."""
    enforce_own_email(current_user, email)
    parcels = await service.rider_tasks(email)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/completed-parcels", response_model=List[ParcelResponse])
async def list_rider_completed_parcels(
    email: str = Query(..., description="Rider email"),
    current_user: dict = Depends(require_rider),
    service: ParcelLifecycleService = Depends(get_lifecycle_service)
):
    enforce_own_email(current_user, email)
    parcels = await service.rider_completed(email)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.patch("/{rider_id}/status", response_model=RiderStatusResult)
async def update_rider_status(
    rider_id: str = Path(..., description="Rider ID"),
    update: RiderStatusUpdate = ...,
    current_user: dict = Depends(require_admin),
    service: RiderAvailabilityService = Depends(get_rider_service)
):
    """
    Approve or deactivate a rider (Admin only).

    Activating a rider also gives the matching user the rider role.
    """
    rider_updated, role_updated = await service.set_status(
        parse_id(rider_id, "rider_id"),
        update.status,
        work_status=update.work_status,
        email=update.email,
        actor_email=current_user["email"],
    )
    return RiderStatusResult(rider_updated=rider_updated, role_updated=role_updated)
