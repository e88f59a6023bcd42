"""
Analytics API Endpoints.

Read-only status counts for the customer, rider and admin dashboards.
"""

from fastapi import APIRouter, Depends, Path
from typing import List

from parcel_backend.app.api.v1.providers import get_analytics_service
from parcel_backend.app.schemas.analytics import StatusCount
from parcel_backend.app.services.analytics import AnalyticsService

router = APIRouter(prefix="/parcels", tags=["Parcels - Analytics"])


@router.get("/delivery/status-count", response_model=List[StatusCount])
async def get_delivery_status_counts(
    service: AnalyticsService = Depends(get_analytics_service)
):
    """All parcels grouped by delivery status."""
    return await service.delivery_status_counts()


@router.get("/delivery/status-count/{email}", response_model=List[StatusCount])
async def get_rider_delivery_status_counts(
    email: str = Path(..., description="Assigned rider email"),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Parcels assigned to a rider grouped by delivery status."""
    return await service.rider_delivery_status_counts(email)


@router.get("/pay/payment-count/{email}", response_model=List[StatusCount])
async def get_payment_status_counts(
    email: str = Path(..., description="Customer email"),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """A customer's parcels grouped by payment status."""
    return await service.payment_status_counts(email)
