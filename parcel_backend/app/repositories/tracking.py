"""
Tracking event store. Insert and read only.
"""

from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.models.tracking_event import TrackingEvent


class TrackingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, event: TrackingEvent) -> TrackingEvent:
        self.db.add(event)
        await self.db.flush()
        return event

    async def history(self, tracking_id: str) -> Sequence[TrackingEvent]:
        result = await self.db.execute(
            select(TrackingEvent)
            .where(TrackingEvent.tracking_id == tracking_id)
            .order_by(TrackingEvent.timestamp.asc(), TrackingEvent.id.asc())
        )
        return result.scalars().all()
