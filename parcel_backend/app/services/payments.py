"""
Payment recording service.

A payment is recorded only if it flips its parcel from unpaid to paid. The
flip and the Payment insert commit together, so a paid parcel always has the
payment row that paid it and a second payment for the same parcel is
rejected without leaving a row behind.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from parcel_backend.app.core.identifiers import parse_id
from parcel_backend.app.models.parcel import utcnow
from parcel_backend.app.models.payment import Payment
from parcel_backend.app.repositories.parcel import ParcelRepository
from parcel_backend.app.repositories.payment import PaymentRepository
from parcel_backend.app.schemas.payment import PaymentCreate
from parcel_backend.app.services.audit import record_event, log_event, AuditAction

logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, db: AsyncSession, parcels: ParcelRepository, payments: PaymentRepository):
        self.db = db
        self.parcels = parcels
        self.payments = payments

    async def record(self, data: PaymentCreate) -> Payment:
        """
        Mark the parcel paid and store the payment.

        Raises:
            ValidationError: parcelId is not a valid identifier
            ResourceNotFoundError: parcel does not exist
            ConflictError: parcel is already paid
        """
        parcel_id = parse_id(data.parcel_id, "parcelId")

        modified = await self.parcels.mark_paid(parcel_id)
        if modified == 0:
            exists = await self.parcels.exists(parcel_id)
            await self.db.rollback()
            await self._reject(parcel_id, data, "already_paid" if exists else "parcel_not_found")
            if exists:
                raise ConflictError(
                    "Parcel is already paid",
                    details={"parcel_id": parcel_id}
                )
            raise ResourceNotFoundError("Parcel", parcel_id)

        now = utcnow()
        payment = Payment(
            parcel_id=parcel_id,
            email=data.email,
            amount=data.amount,
            payment_method=data.payment_method,
            transaction_id=data.transaction_id,
            paid_at=now,
            paid_at_string=now.isoformat(),
        )
        await self.payments.add(payment)
        record_event(
            self.db,
            action=AuditAction.PAYMENT_RECORDED,
            entity="parcel",
            entity_id=parcel_id,
            actor_email=data.email,
            metadata={"payment_id": payment.id, "amount": data.amount, "transaction_id": data.transaction_id}
        )
        await self.db.commit()
        await self.db.refresh(payment)

        logger.info("Payment %s recorded for parcel %s", payment.id, parcel_id)
        return payment

    async def _reject(self, parcel_id: int, data: PaymentCreate, reason: str) -> None:
        logger.warning("Payment for parcel %s rejected: %s", parcel_id, reason)
        await log_event(
            self.db,
            action=AuditAction.PAYMENT_REJECTED,
            entity="parcel",
            entity_id=parcel_id,
            actor_email=data.email,
            metadata={
                "reason": reason,
                "amount": data.amount,
                "payment_method": data.payment_method,
                "transaction_id": data.transaction_id,
            }
        )

    async def list(self, email: Optional[str] = None) -> Sequence[Payment]:
        """Payments for email (all when None), newest first."""
        return await self.payments.list(email)
