"""
Payment API Endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.dependencies import get_current_identity
from parcel_backend.app.core.guards import require_self_or_admin
from parcel_backend.app.db.session import get_db
from parcel_backend.app.schemas.payment import (
    PaymentCreate, PaymentRecorded, PaymentResponse,
    PaymentIntentRequest, PaymentIntentResponse
)
from parcel_backend.app.services.payment_gateway import PaymentGateway, get_payment_gateway
from parcel_backend.app.services.payments import PaymentService
from parcel_backend.app.api.v1.providers import get_payment_service

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", response_model=PaymentRecorded, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: PaymentCreate,
    service: PaymentService = Depends(get_payment_service)
):
    """
    Record a payment and mark its parcel paid.

    404 if the parcel does not exist, 409 if it is already paid; in both
    cases no payment row is written.
    """
    payment = await service.record(payment_data)
    return PaymentRecorded(
        message="Payment recorded and marked as paid",
        inserted_id=payment.id
    )


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    email: Optional[str] = Query(None, description="Payer email"),
    current_user: dict = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    service: PaymentService = Depends(get_payment_service)
):
    """Payment history, newest first. Callers see their own; admins see any."""
    await require_self_or_admin(db, current_user, email)
    payments = await service.list(email)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("/intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent: PaymentIntentRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """Create a card payment intent with the gateway and return its client secret."""
    client_secret = await gateway.create_intent(intent.amount_in_cents, intent.currency)
    return PaymentIntentResponse(client_secret=client_secret)
