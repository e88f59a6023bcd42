"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Union


class PaymentCreate(BaseModel):
    """Payment confirmed by the client after the gateway charge succeeded."""
    parcel_id: Union[int, str] = Field(..., alias="parcelId")
    email: str = Field(..., min_length=3, max_length=255)
    amount: float = Field(..., gt=0)
    payment_method: str = Field(..., min_length=1, max_length=100, alias="paymentMethod")
    transaction_id: str = Field(..., min_length=1, max_length=255, alias="transactionId")

    class Config:
        populate_by_name = True


class PaymentRecorded(BaseModel):
    message: str
    inserted_id: int


class PaymentResponse(BaseModel):
    id: int
    parcel_id: int
    email: str
    amount: float
    payment_method: str
    transaction_id: str
    paid_at: datetime
    paid_at_string: str

    class Config:
        from_attributes = True


class PaymentIntentRequest(BaseModel):
    amount_in_cents: int = Field(..., gt=0, alias="amountInCents")
    currency: str = Field("usd", min_length=3, max_length=3)

    class Config:
        populate_by_name = True


class PaymentIntentResponse(BaseModel):
    client_secret: str
