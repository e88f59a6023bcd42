"""
Parcel store.

Single-row conditional updates return the number of rows they actually
changed, so callers can tell a transition from a no-op.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.models.parcel import Parcel, utcnow
from parcel_backend.app.models.parcel_enums import (
    DeliveryStatus, PaymentStatus, CashoutStatus, OPEN_STATUSES
)


class ParcelRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, parcel: Parcel) -> Parcel:
        self.db.add(parcel)
        await self.db.flush()
        return parcel

    async def get(self, parcel_id: int) -> Optional[Parcel]:
        result = await self.db.execute(
            select(Parcel)
            .where(Parcel.id == parcel_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_tracking_id(self, tracking_id: str) -> Optional[Parcel]:
        result = await self.db.execute(
            select(Parcel).where(Parcel.tracking_id == tracking_id)
        )
        return result.scalar_one_or_none()

    async def exists(self, parcel_id: int) -> bool:
        result = await self.db.execute(
            select(func.count(Parcel.id)).where(Parcel.id == parcel_id)
        )
        return result.scalar() > 0

    async def list(
        self,
        created_by: Optional[str] = None,
        payment_status: Optional[PaymentStatus] = None,
        delivery_status: Optional[DeliveryStatus] = None,
    ) -> Sequence[Parcel]:
        query = select(Parcel)
        if created_by:
            query = query.where(Parcel.created_by == created_by)
        if payment_status:
            query = query.where(Parcel.payment_status == payment_status)
        if delivery_status:
            query = query.where(Parcel.delivery_status == delivery_status)
        query = query.order_by(Parcel.created_at.desc(), Parcel.id.desc())

        result = await self.db.execute(query)
        return result.scalars().all()

    async def list_for_rider(self, rider_email: str, statuses: Sequence[DeliveryStatus]) -> Sequence[Parcel]:
        result = await self.db.execute(
            select(Parcel)
            .where(
                Parcel.assigned_rider_email == rider_email,
                Parcel.delivery_status.in_(statuses)
            )
            .order_by(Parcel.created_at.desc(), Parcel.id.desc())
        )
        return result.scalars().all()

    async def transition(
        self,
        parcel_id: int,
        from_status: DeliveryStatus,
        to_status: DeliveryStatus,
        extra: Optional[Dict[str, Any]] = None,
        assigned_rider_id: Optional[int] = None,
    ) -> int:
        """
        Move a parcel from from_status to to_status.

        Returns 0 when the parcel is missing, is not in from_status, or (when
        assigned_rider_id is given) is assigned to someone else.
        """
        values = dict(extra or {})
        values.update(
            delivery_status=to_status,
            version=Parcel.version + 1,
            updated_at=utcnow(),
        )
        criteria = [Parcel.id == parcel_id, Parcel.delivery_status == from_status]
        if assigned_rider_id is not None:
            criteria.append(Parcel.assigned_rider_id == assigned_rider_id)

        result = await self.db.execute(
            update(Parcel)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def mark_paid(self, parcel_id: int) -> int:
        result = await self.db.execute(
            update(Parcel)
            .where(Parcel.id == parcel_id, Parcel.payment_status != PaymentStatus.PAID)
            .values(
                payment_status=PaymentStatus.PAID,
                version=Parcel.version + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def cash_out(self, parcel_id: int, at: datetime) -> int:
        result = await self.db.execute(
            update(Parcel)
            .where(Parcel.id == parcel_id, Parcel.cashout_status != CashoutStatus.CASHED_OUT)
            .values(
                cashout_status=CashoutStatus.CASHED_OUT,
                cashed_out_at=at,
                version=Parcel.version + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete(self, parcel_id: int) -> int:
        result = await self.db.execute(
            delete(Parcel)
            .where(Parcel.id == parcel_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def count_grouped(self, column, *criteria) -> List[Tuple[Any, int]]:
        """Filter by criteria, then group by column and count."""
        query = select(column, func.count(Parcel.id)).select_from(Parcel)
        if criteria:
            query = query.where(*criteria)
        query = query.group_by(column)

        result = await self.db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def open_assignments(self) -> List[Tuple[int, DeliveryStatus]]:
        """(rider_id, delivery_status) for every assigned parcel still on the road."""
        result = await self.db.execute(
            select(Parcel.assigned_rider_id, Parcel.delivery_status).where(
                Parcel.assigned_rider_id.is_not(None),
                Parcel.delivery_status.in_(OPEN_STATUSES)
            )
        )
        return [(row[0], row[1]) for row in result.all()]
