"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from parcel_backend.app.api.v1.endpoints import (
    analytics, parcels, riders, users, payments, trackings, admin_ops
)

router = APIRouter()

# Analytics first: its /parcels/delivery/... paths must not be shadowed
router.include_router(analytics.router)
router.include_router(parcels.router)

router.include_router(riders.router)
router.include_router(users.router)
router.include_router(payments.router)
router.include_router(trackings.router)
router.include_router(admin_ops.router)
