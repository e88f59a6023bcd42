"""
Parcel lifecycle service.

Owns the delivery_status state machine:

    pending --assign--> in_transit --pickup--> picked_up --deliver--> delivered

Every transition is a conditional update on the parcel's current status, so a
parcel can only move forward. The matching rider work_status change is made
in the same transaction and committed together with the parcel write.
"""

import logging
import secrets
import string
from typing import Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.exceptions import ResourceNotFoundError, ConflictError
from parcel_backend.app.models.parcel import Parcel, utcnow
from parcel_backend.app.models.parcel_enums import (
    DeliveryStatus, PaymentStatus, CashoutStatus,
    LIFECYCLE_TRANSITIONS, OPEN_STATUSES, COMPLETED_STATUSES
)
from parcel_backend.app.models.rider_enums import WorkStatus
from parcel_backend.app.models.tracking_event import TrackingEvent
from parcel_backend.app.repositories.parcel import ParcelRepository
from parcel_backend.app.repositories.rider import RiderRepository
from parcel_backend.app.repositories.tracking import TrackingRepository
from parcel_backend.app.schemas.parcel import ParcelCreate, TransitionResult, CashoutResult
from parcel_backend.app.services.audit import record_event, AuditAction

logger = logging.getLogger(__name__)

TRACKING_ID_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_ID_ATTEMPTS = 5

# Rider work_status that accompanies each parcel transition
RIDER_STATE_FOR_ACTION = {
    "assign": WorkStatus.IN_DELIVERY,
    "pickup": WorkStatus.BUSY,
    "deliver": WorkStatus.FREE,
}


def generate_tracking_id() -> str:
    return "TRK-" + "".join(secrets.choice(TRACKING_ID_ALPHABET) for _ in range(10))


class ParcelLifecycleService:

    def __init__(
        self,
        db: AsyncSession,
        parcels: ParcelRepository,
        riders: RiderRepository,
        tracking: TrackingRepository,
    ):
        self.db = db
        self.parcels = parcels
        self.riders = riders
        self.tracking = tracking

    # --- Intake and reads ---

    async def create(self, data: ParcelCreate) -> Tuple[Parcel, bool]:
        """
        Book a parcel, or return the existing one for a known tracking_id.

        Returns:
            (parcel, created)
        """
        if data.tracking_id:
            existing = await self.parcels.get_by_tracking_id(data.tracking_id)
            if existing:
                return existing, False

        for attempt in range(1, TRACKING_ID_ATTEMPTS + 1):
            parcel = Parcel(
                **data.model_dump(exclude={"tracking_id"}),
                tracking_id=data.tracking_id or generate_tracking_id(),
                delivery_status=DeliveryStatus.PENDING,
                payment_status=PaymentStatus.UNPAID,
                cashout_status=CashoutStatus.NONE,
                version=1,
            )
            try:
                await self.parcels.add(parcel)
                break
            except IntegrityError:
                await self.db.rollback()
                if data.tracking_id:
                    # Concurrent booking with the same tracking_id won the insert
                    existing = await self.parcels.get_by_tracking_id(data.tracking_id)
                    if existing is None:
                        raise
                    return existing, False
                if attempt == TRACKING_ID_ATTEMPTS:
                    raise
                logger.warning("Generated tracking_id %s already taken, retrying", parcel.tracking_id)

        record_event(
            self.db,
            action=AuditAction.PARCEL_CREATED,
            entity="parcel",
            entity_id=parcel.id,
            actor_email=parcel.created_by,
            metadata={"tracking_id": parcel.tracking_id}
        )
        await self.db.commit()
        await self.db.refresh(parcel)

        logger.info("Parcel %s booked by %s", parcel.id, parcel.created_by)
        return parcel, True

    async def get(self, parcel_id: int) -> Parcel:
        parcel = await self.parcels.get(parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)
        return parcel

    async def list(
        self,
        email: Optional[str] = None,
        payment_status: Optional[PaymentStatus] = None,
        delivery_status: Optional[DeliveryStatus] = None,
    ) -> Sequence[Parcel]:
        return await self.parcels.list(
            created_by=email,
            payment_status=payment_status,
            delivery_status=delivery_status,
        )

    async def rider_tasks(self, rider_email: str) -> Sequence[Parcel]:
        """Parcels the rider still has to pick up or drop off."""
        return await self.parcels.list_for_rider(rider_email, OPEN_STATUSES)

    async def rider_completed(self, rider_email: str) -> Sequence[Parcel]:
        return await self.parcels.list_for_rider(rider_email, COMPLETED_STATUSES)

    # --- Transitions ---

    async def assign(
        self,
        parcel_id: int,
        rider_id: int,
        rider_name: str,
        rider_email: str,
    ) -> Tuple[Parcel, int, int]:
        """
        Assign a rider to a pending parcel.

        Returns:
            (updated parcel, parcel rows changed, rider rows changed)

        Raises:
            ResourceNotFoundError: parcel or rider missing
            ConflictError: parcel is no longer pending
        """
        parcel = await self.parcels.get(parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)

        rider = await self.riders.get(rider_id)
        if rider is None:
            raise ResourceNotFoundError("Rider", rider_id)

        from_status, to_status = LIFECYCLE_TRANSITIONS["assign"]
        if parcel.delivery_status != from_status:
            raise ConflictError(
                f"Can only assign a rider to a pending parcel, current status: {parcel.delivery_status.value}",
                details={"parcel_id": parcel_id, "delivery_status": parcel.delivery_status.value}
            )

        parcel_updated = await self.parcels.transition(
            parcel_id,
            from_status,
            to_status,
            extra={
                "assigned_rider_id": rider.id,
                "assigned_rider_name": rider_name,
                "assigned_rider_email": rider_email,
            },
        )
        if parcel_updated == 0:
            # Another request moved the parcel between the read and the write
            await self.db.rollback()
            raise ConflictError(
                "Parcel was assigned concurrently",
                details={"parcel_id": parcel_id}
            )

        rider_updated = await self.riders.set_work_status(rider.id, RIDER_STATE_FOR_ACTION["assign"])
        record_event(
            self.db,
            action=AuditAction.PARCEL_ASSIGNED,
            entity="parcel",
            entity_id=parcel_id,
            metadata={"rider_id": rider.id, "rider_email": rider_email}
        )
        await self.db.commit()

        logger.info("Parcel %s assigned to rider %s", parcel_id, rider.id)
        return await self.parcels.get(parcel_id), parcel_updated, rider_updated

    async def pickup(self, parcel_id: int, rider_id: int) -> TransitionResult:
        return await self._advance("pickup", parcel_id, rider_id)

    async def deliver(self, parcel_id: int, rider_id: int, message: Optional[str] = None) -> TransitionResult:
        return await self._advance("deliver", parcel_id, rider_id, message=message)

    async def _advance(
        self,
        action: str,
        parcel_id: int,
        rider_id: int,
        message: Optional[str] = None,
    ) -> TransitionResult:
        """
        Move an assigned parcel one step forward and update its rider.

        Never raises for a missing parcel or a parcel in the wrong state; the
        zero counts tell the caller nothing changed. If the parcel already sits
        in the target state with this rider, only the rider is brought in line,
        which makes a retried call repair a rider write that was lost.
        """
        from_status, to_status = LIFECYCLE_TRANSITIONS[action]
        work_status = RIDER_STATE_FOR_ACTION[action]

        parcel_updated = await self.parcels.transition(
            parcel_id, from_status, to_status, assigned_rider_id=rider_id
        )

        rider_updated = 0
        if parcel_updated:
            rider_updated = await self.riders.set_work_status(rider_id, work_status)
            parcel = await self.parcels.get(parcel_id)
            if message:
                await self.tracking.add(TrackingEvent(
                    tracking_id=parcel.tracking_id,
                    status=to_status.value,
                    note=message,
                    timestamp=utcnow(),
                ))
            record_event(
                self.db,
                action=AuditAction.PARCEL_PICKED_UP if action == "pickup" else AuditAction.PARCEL_DELIVERED,
                entity="parcel",
                entity_id=parcel_id,
                metadata={"rider_id": rider_id}
            )
            logger.info("Parcel %s moved to %s by rider %s", parcel_id, to_status.value, rider_id)
        else:
            parcel = await self.parcels.get(parcel_id)
            if (
                parcel is not None
                and parcel.delivery_status == to_status
                and parcel.assigned_rider_id == rider_id
            ):
                rider_updated = await self.riders.set_work_status(rider_id, work_status)
                if rider_updated:
                    logger.warning(
                        "Rider %s work_status repaired to %s on repeated %s of parcel %s",
                        rider_id, work_status.value, action, parcel_id
                    )
            else:
                logger.warning("No-op %s for parcel %s by rider %s", action, parcel_id, rider_id)

        await self.db.commit()
        return TransitionResult(parcel_updated=parcel_updated, rider_updated=rider_updated)

    async def cashout(self, parcel_id: int) -> CashoutResult:
        """Mark the rider's fee for a parcel as settled. Repeating it is a no-op."""
        if not await self.parcels.exists(parcel_id):
            return CashoutResult(matched_count=0, modified_count=0)

        modified = await self.parcels.cash_out(parcel_id, utcnow())
        if modified:
            record_event(
                self.db,
                action=AuditAction.PARCEL_CASHED_OUT,
                entity="parcel",
                entity_id=parcel_id
            )
        await self.db.commit()

        return CashoutResult(matched_count=1, modified_count=modified)

    async def delete(self, parcel_id: int) -> int:
        """Hard delete. Payments and tracking events are left untouched."""
        deleted = await self.parcels.delete(parcel_id)
        if deleted:
            record_event(
                self.db,
                action=AuditAction.PARCEL_DELETED,
                entity="parcel",
                entity_id=parcel_id
            )
            logger.info("Parcel %s deleted", parcel_id)
        await self.db.commit()
        return deleted
