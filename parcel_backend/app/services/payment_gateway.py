"""
Payment gateway client.

Creates card payment intents on a Stripe-compatible REST API. The rest of
the service only sees the PaymentGateway protocol; tests swap in a fake.
"""

import logging
from typing import Optional, Protocol

import httpx

from parcel_backend.app.core.config import settings
from parcel_backend.app.core.exceptions import GatewayError, ServiceUnavailableError
from parcel_backend.app.core.reliability import CircuitBreaker, CircuitOpenError, payment_circuit_breaker

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    async def create_intent(self, amount_in_cents: int, currency: str) -> str:
        """Returns the client secret of the new payment intent."""
        ...


class StripeGateway:
    """
    Client errors (4xx) come back as GatewayError with the gateway's message.
    Transport failures and 5xx responses count against the circuit breaker
    and surface as ServiceUnavailableError.
    """

    def __init__(
        self,
        api_key: str = None,
        base_url: str = None,
        timeout: float = None,
        breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.payment_gateway_key
        self.base_url = base_url or settings.payment_gateway_url
        self.timeout = timeout or settings.payment_gateway_timeout_seconds
        self.breaker = breaker or payment_circuit_breaker
        self.transport = transport

    async def create_intent(self, amount_in_cents: int, currency: str) -> str:
        payload = {
            "amount": str(amount_in_cents),
            "currency": currency.lower(),
            "payment_method_types[]": "card",
        }
        try:
            response = await self.breaker.call(self._post, "/payment_intents", payload)
        except CircuitOpenError:
            logger.warning("Payment gateway circuit open, rejecting intent")
            raise ServiceUnavailableError("Payment gateway temporarily unavailable")
        except httpx.HTTPError as exc:
            logger.error("Payment gateway request failed: %s", exc)
            raise ServiceUnavailableError("Payment gateway unreachable") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = (body.get("error") or {}).get("message") or "Payment gateway rejected the request"
            raise GatewayError(message)

        client_secret = body.get("client_secret")
        if not client_secret:
            logger.error("Payment gateway response carried no client_secret")
            raise ServiceUnavailableError("Payment gateway returned an invalid response")
        return client_secret

    async def _post(self, path: str, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            response = await client.post(path, data=payload, auth=(self.api_key, ""))

        if response.status_code >= 500:
            response.raise_for_status()
        return response


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency; overridden in tests."""
    return StripeGateway()
