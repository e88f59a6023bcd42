"""
Analytics Service.

Grouped parcel counts for dashboards. READ-ONLY.

Filters are applied before grouping; only statuses that occur in the filtered
set are returned (no zero-filled entries) and order is unspecified.
"""

from typing import List

from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.repositories.parcel import ParcelRepository
from parcel_backend.app.schemas.analytics import StatusCount


def _to_counts(rows) -> List[StatusCount]:
    return [
        StatusCount(status=getattr(status, "value", status), count=count)
        for status, count in rows
        if count > 0
    ]


class AnalyticsService:

    def __init__(self, parcels: ParcelRepository):
        self.parcels = parcels

    async def delivery_status_counts(self) -> List[StatusCount]:
        """All parcels grouped by delivery_status."""
        rows = await self.parcels.count_grouped(Parcel.delivery_status)
        return _to_counts(rows)

    async def payment_status_counts(self, creator_email: str) -> List[StatusCount]:
        """A customer's parcels grouped by payment_status."""
        rows = await self.parcels.count_grouped(
            Parcel.payment_status,
            Parcel.created_by == creator_email
        )
        return _to_counts(rows)

    async def rider_delivery_status_counts(self, rider_email: str) -> List[StatusCount]:
        """Parcels assigned to a rider grouped by delivery_status."""
        rows = await self.parcels.count_grouped(
            Parcel.delivery_status,
            Parcel.assigned_rider_email == rider_email
        )
        return _to_counts(rows)
