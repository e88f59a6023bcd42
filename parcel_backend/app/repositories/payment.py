"""
Payment store.
"""

from typing import Optional, Sequence
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.models.payment import Payment


class PaymentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, payment: Payment) -> Payment:
        self.db.add(payment)
        await self.db.flush()
        return payment

    async def list(self, email: Optional[str] = None) -> Sequence[Payment]:
        query = select(Payment)
        if email:
            query = query.where(Payment.email == email)
        query = query.order_by(Payment.paid_at.desc(), Payment.id.desc())

        result = await self.db.execute(query)
        return result.scalars().all()

    async def count_for_parcel(self, parcel_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Payment.id)).where(Payment.parcel_id == parcel_id)
        )
        return result.scalar()
