"""
Service providers.

Each request gets services built over its own session, with the stores
passed in explicitly.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.db.session import get_db
from parcel_backend.app.repositories.parcel import ParcelRepository
from parcel_backend.app.repositories.payment import PaymentRepository
from parcel_backend.app.repositories.rider import RiderRepository
from parcel_backend.app.repositories.tracking import TrackingRepository
from parcel_backend.app.repositories.user import UserRepository
from parcel_backend.app.services.analytics import AnalyticsService
from parcel_backend.app.services.lifecycle import ParcelLifecycleService
from parcel_backend.app.services.payments import PaymentService
from parcel_backend.app.services.reconciliation import ReconciliationService
from parcel_backend.app.services.rider_availability import RiderAvailabilityService
from parcel_backend.app.services.tracking import TrackingService
from parcel_backend.app.services.users import UserService


def get_lifecycle_service(db: AsyncSession = Depends(get_db)) -> ParcelLifecycleService:
    return ParcelLifecycleService(db, ParcelRepository(db), RiderRepository(db), TrackingRepository(db))


def get_rider_service(db: AsyncSession = Depends(get_db)) -> RiderAvailabilityService:
    return RiderAvailabilityService(db, RiderRepository(db), UserRepository(db))


def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(ParcelRepository(db))


def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(db, ParcelRepository(db), PaymentRepository(db))


def get_tracking_service(db: AsyncSession = Depends(get_db)) -> TrackingService:
    return TrackingService(db, TrackingRepository(db))


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, UserRepository(db), RiderRepository(db))


def get_reconciliation_service(db: AsyncSession = Depends(get_db)) -> ReconciliationService:
    return ReconciliationService(db, ParcelRepository(db), RiderRepository(db))
