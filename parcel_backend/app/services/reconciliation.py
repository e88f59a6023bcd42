"""
Rider work_status reconciliation.

Recomputes each rider's expected work_status from the parcels assigned to
them and repairs riders whose stored value drifted (back-office edits,
service-center completions, writes from older clients).
"""

import logging
from collections import defaultdict
from typing import Dict, List, Set

from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.models.parcel_enums import DeliveryStatus
from parcel_backend.app.models.rider_enums import WorkStatus
from parcel_backend.app.repositories.parcel import ParcelRepository
from parcel_backend.app.repositories.rider import RiderRepository
from parcel_backend.app.schemas.rider import RiderRepair, ReconciliationReport
from parcel_backend.app.services.audit import record_event, AuditAction

logger = logging.getLogger(__name__)


def expected_work_status(open_statuses: Set[DeliveryStatus]) -> WorkStatus:
    if DeliveryStatus.PICKED_UP in open_statuses:
        return WorkStatus.BUSY
    if DeliveryStatus.IN_TRANSIT in open_statuses:
        return WorkStatus.IN_DELIVERY
    return WorkStatus.FREE


class ReconciliationService:

    def __init__(self, db: AsyncSession, parcels: ParcelRepository, riders: RiderRepository):
        self.db = db
        self.parcels = parcels
        self.riders = riders

    async def sweep(self, actor_email: str = None) -> ReconciliationReport:
        open_by_rider: Dict[int, Set[DeliveryStatus]] = defaultdict(set)
        for rider_id, delivery_status in await self.parcels.open_assignments():
            open_by_rider[rider_id].add(delivery_status)

        riders = await self.riders.list_all()
        repairs: List[RiderRepair] = []
        for rider in riders:
            expected = expected_work_status(open_by_rider.get(rider.id, set()))
            if rider.work_status == expected:
                continue

            changed = await self.riders.set_work_status(rider.id, expected)
            if not changed:
                continue

            repairs.append(RiderRepair(rider_id=rider.id, previous=rider.work_status, corrected=expected))
            record_event(
                self.db,
                action=AuditAction.RIDER_RECONCILED,
                entity="rider",
                entity_id=rider.id,
                actor_email=actor_email,
                metadata={"previous": rider.work_status.value, "corrected": expected.value}
            )
            logger.warning(
                "Rider %s work_status repaired: %s -> %s",
                rider.id, rider.work_status.value, expected.value
            )

        await self.db.commit()
        return ReconciliationReport(riders_checked=len(riders), repairs=repairs)
