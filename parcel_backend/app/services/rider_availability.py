"""
Rider availability service.

Read paths over riders by status, work_status and district, plus the rider
approval flow that promotes the matching user to the rider role.
"""

import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.exceptions import ResourceNotFoundError, ValidationError
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.rider_enums import RiderStatus, WorkStatus
from parcel_backend.app.repositories.rider import RiderRepository
from parcel_backend.app.repositories.user import UserRepository
from parcel_backend.app.schemas.rider import RiderApplication
from parcel_backend.app.services.audit import record_event, AuditAction

logger = logging.getLogger(__name__)


class RiderAvailabilityService:

    def __init__(self, db: AsyncSession, riders: RiderRepository, users: UserRepository):
        self.db = db
        self.riders = riders
        self.users = users

    async def apply(self, application: RiderApplication) -> Rider:
        """Register a rider application; approval happens through set_status."""
        rider = Rider(
            **application.model_dump(),
            status=RiderStatus.PENDING,
            work_status=WorkStatus.FREE,
        )
        await self.riders.add(rider)
        record_event(
            self.db,
            action=AuditAction.RIDER_APPLIED,
            entity="rider",
            entity_id=rider.id,
            actor_email=rider.email
        )
        await self.db.commit()
        await self.db.refresh(rider)
        return rider

    async def list_by_status(self, status: RiderStatus) -> Sequence[Rider]:
        if status not in (RiderStatus.PENDING, RiderStatus.ACTIVE):
            raise ValidationError("Only pending or active riders can be listed by status")
        return await self.riders.list_by_status([status])

    async def list_active_or_deactive(self) -> Sequence[Rider]:
        return await self.riders.list_by_status([RiderStatus.ACTIVE, RiderStatus.DEACTIVE])

    async def list_available(self, district: str) -> Sequence[Rider]:
        """Active, free riders in a district."""
        if not district or not district.strip():
            raise ValidationError("district is required")
        return await self.riders.list_available(district.strip())

    async def set_status(
        self,
        rider_id: int,
        status: RiderStatus,
        work_status: Optional[WorkStatus] = None,
        email: Optional[str] = None,
        actor_email: Optional[str] = None,
    ) -> Tuple[int, int]:
        """
        Approve, activate or deactivate a rider.

        Activation also promotes the user with the rider's email to the rider
        role. Both writes share one transaction.

        Returns:
            (rider rows changed, user rows changed)
        """
        rider = await self.riders.get(rider_id)
        if rider is None:
            raise ResourceNotFoundError("Rider", rider_id)

        rider_updated = await self.riders.set_status(rider_id, status, work_status)

        role_updated = 0
        if status == RiderStatus.ACTIVE:
            user_email = email or rider.email
            user = await self.users.get_by_email(user_email)
            # Admins keep their role when they also ride
            if user is not None and user.role != UserRole.ADMIN:
                role_updated = await self.users.set_role_by_email(user_email, UserRole.RIDER)
            elif user is None:
                logger.warning("Rider %s activated but no user exists for %s", rider_id, user_email)

        record_event(
            self.db,
            action=AuditAction.RIDER_STATUS_CHANGED,
            entity="rider",
            entity_id=rider_id,
            actor_email=actor_email,
            metadata={
                "previous_status": rider.status.value,
                "status": status.value,
                "work_status": work_status.value if work_status else None,
                "role_updated": role_updated,
            }
        )
        await self.db.commit()

        logger.info("Rider %s status set to %s", rider_id, status.value)
        return rider_updated, role_updated
