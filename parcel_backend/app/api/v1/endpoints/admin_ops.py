"""
Admin Ops Endpoints.

Maintenance actions for the back office.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.guards import require_admin
from parcel_backend.app.core.identifiers import parse_id
from parcel_backend.app.db.session import get_db
from parcel_backend.app.schemas.rider import ReconciliationReport
from parcel_backend.app.services.audit import get_audit_trail
from parcel_backend.app.services.reconciliation import ReconciliationService
from parcel_backend.app.api.v1.providers import get_reconciliation_service

router = APIRouter(prefix="/admin", tags=["Admin - Ops"])


@router.post("/reconcile", response_model=ReconciliationReport)
async def reconcile_riders(
    current_user: dict = Depends(require_admin),
    service: ReconciliationService = Depends(get_reconciliation_service)
):
    """Repair rider work_status values that disagree with their parcels."""
    return await service.sweep(actor_email=current_user["email"])


@router.get("/audit")
async def list_audit_trail(
    entity: Optional[str] = Query(None),
    entity_id: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
) -> List[dict]:
    """Recent audit entries, newest first."""
    entries = await get_audit_trail(
        db,
        entity=entity,
        entity_id=parse_id(entity_id, "entity_id") if entity_id else None,
        action=action,
        limit=limit
    )
    return [
        {
            "id": e.id,
            "action": e.action,
            "entity": e.entity,
            "entity_id": e.entity_id,
            "actor_email": e.actor_email,
            "metadata": e.meta_data,
            "timestamp": e.timestamp.isoformat(),
        }
        for e in entries
    ]
