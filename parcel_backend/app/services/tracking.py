"""
Tracking log service.

Append-only history of status notes per tracking_id. Independent of the
parcel's own delivery_status.
"""

from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.exceptions import ValidationError
from parcel_backend.app.models.parcel import utcnow
from parcel_backend.app.models.tracking_event import TrackingEvent
from parcel_backend.app.repositories.tracking import TrackingRepository


class TrackingService:

    def __init__(self, db: AsyncSession, tracking: TrackingRepository):
        self.db = db
        self.tracking = tracking

    async def append(
        self,
        tracking_id: Optional[str],
        status: Optional[str],
        location: Optional[str] = None,
        note: Optional[str] = None,
    ) -> TrackingEvent:
        tracking_id = (tracking_id or "").strip()
        status = (status or "").strip()
        if not tracking_id or not status:
            raise ValidationError(
                "tracking_id and status are required",
                details={"tracking_id": bool(tracking_id), "status": bool(status)}
            )

        event = TrackingEvent(
            tracking_id=tracking_id,
            status=status,
            location=location,
            note=note,
            timestamp=utcnow(),
        )
        await self.tracking.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def history(self, tracking_id: str) -> Sequence[TrackingEvent]:
        """Events for tracking_id, oldest first; insertion order breaks timestamp ties."""
        return await self.tracking.history(tracking_id)
