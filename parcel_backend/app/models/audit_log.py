"""
Audit Log Database Model.

Tracks back-office actions and lifecycle writes for later reconciliation.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.parcel import utcnow


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - PARCEL_ASSIGNED / PARCEL_PICKED_UP / PARCEL_DELIVERED
    - PARCEL_CASHED_OUT / PARCEL_DELETED
    - RIDER_STATUS_CHANGED / ROLE_CHANGED
    - PAYMENT_RECORDED / PAYMENT_REJECTED
    - RIDER_RECONCILED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous callers)
    actor_email = Column(String(255), nullable=True)

    # What action was performed, and on what
    action = Column(String(100), nullable=False, index=True)
    entity = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity}:{self.entity_id})>"
