"""
Rider store.
"""

from typing import Optional, Sequence
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.rider_enums import RiderStatus, WorkStatus


class RiderRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, rider: Rider) -> Rider:
        self.db.add(rider)
        await self.db.flush()
        return rider

    async def get(self, rider_id: int) -> Optional[Rider]:
        result = await self.db.execute(
            select(Rider)
            .where(Rider.id == rider_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_status(self, statuses: Sequence[RiderStatus]) -> Sequence[Rider]:
        result = await self.db.execute(
            select(Rider).where(Rider.status.in_(statuses)).order_by(Rider.id)
        )
        return result.scalars().all()

    async def list_available(self, district: str) -> Sequence[Rider]:
        result = await self.db.execute(
            select(Rider).where(
                Rider.district == district,
                Rider.status == RiderStatus.ACTIVE,
                Rider.work_status == WorkStatus.FREE
            ).order_by(Rider.id)
        )
        return result.scalars().all()

    async def list_all(self) -> Sequence[Rider]:
        result = await self.db.execute(select(Rider).order_by(Rider.id))
        return result.scalars().all()

    async def has_active_rider(self, email: str) -> bool:
        result = await self.db.execute(
            select(func.count(Rider.id)).where(
                Rider.email == email,
                Rider.status == RiderStatus.ACTIVE
            )
        )
        return result.scalar() > 0

    async def set_work_status(self, rider_id: int, work_status: WorkStatus) -> int:
        """Returns 1 only when the stored work_status actually changed."""
        result = await self.db.execute(
            update(Rider)
            .where(Rider.id == rider_id, Rider.work_status != work_status)
            .values(work_status=work_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def set_status(self, rider_id: int, status: RiderStatus, work_status: Optional[WorkStatus]) -> int:
        values = {"status": status}
        if work_status is not None:
            values["work_status"] = work_status
        result = await self.db.execute(
            update(Rider)
            .where(Rider.id == rider_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
