"""
Audit logging service.

Records lifecycle writes, back-office actions and rejected payments so that
partial failures and disputes can be reconciled after the fact.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from parcel_backend.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    ROLE_CHANGED = "ROLE_CHANGED"

    # Parcel lifecycle
    PARCEL_CREATED = "PARCEL_CREATED"
    PARCEL_ASSIGNED = "PARCEL_ASSIGNED"
    PARCEL_PICKED_UP = "PARCEL_PICKED_UP"
    PARCEL_DELIVERED = "PARCEL_DELIVERED"
    PARCEL_CASHED_OUT = "PARCEL_CASHED_OUT"
    PARCEL_DELETED = "PARCEL_DELETED"

    # Riders
    RIDER_APPLIED = "RIDER_APPLIED"
    RIDER_STATUS_CHANGED = "RIDER_STATUS_CHANGED"
    RIDER_RECONCILED = "RIDER_RECONCILED"

    # Payments
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    PAYMENT_REJECTED = "PAYMENT_REJECTED"


def record_event(
    db: AsyncSession,
    action: str,
    entity: Optional[str] = None,
    entity_id: Optional[int] = None,
    actor_email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Stage an audit entry in the caller's transaction.

    The entry is committed together with the write it describes.
    """
    audit_log = AuditLog(
        actor_email=actor_email,
        action=action,
        entity=entity,
        entity_id=entity_id,
        meta_data=metadata
    )
    db.add(audit_log)
    return audit_log


async def log_event(
    db: AsyncSession,
    action: str,
    entity: Optional[str] = None,
    entity_id: Optional[int] = None,
    actor_email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Write a standalone audit entry and commit it immediately.

    Used for events that have no accompanying write, such as a rejected
    payment attempt.

    Returns:
        Created AuditLog instance
    """
    audit_log = record_event(
        db,
        action=action,
        entity=entity,
        entity_id=entity_id,
        actor_email=actor_email,
        metadata=metadata
    )
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    entity: Optional[str] = None,
    entity_id: Optional[int] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if entity:
        query = query.where(AuditLog.entity == entity)

    if entity_id:
        query = query.where(AuditLog.entity_id == entity_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
