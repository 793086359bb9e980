"""Payment gateway clients.

`create_payment_gateway` picks one implementation from settings:

- RazorpayGateway: real Orders API over httpx, when credentials are configured
- DevMockGateway: outside production without credentials; no network I/O
- DisabledGateway: production without credentials; every call fails
"""

import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import httpx

from app.core.config import Settings, settings as app_settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """The gateway could not be reached, timed out, or refused the request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class GatewayOrder:
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: str = "created"


class PaymentGateway(ABC):
    key_id: Optional[str] = None
    key_secret: Optional[str] = None
    enabled: bool = True
    name: str = "razorpay"

    @abstractmethod
    def create_order(self, amount: int, currency: str, receipt: Optional[str] = None) -> GatewayOrder:
        """Create an order for `amount` minor currency units."""


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self._client = httpx.Client(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            transport=transport,
        )

    def create_order(self, amount: int, currency: str, receipt: Optional[str] = None) -> GatewayOrder:
        payload = {"amount": amount, "currency": currency}
        if receipt:
            payload["receipt"] = receipt
        try:
            response = self._client.post("/orders", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise GatewayError(f"Timed out creating order: {e}") from e
        except httpx.HTTPStatusError as e:
            raise GatewayError(
                f"Order creation rejected with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise GatewayError(f"Could not reach payment gateway: {e}") from e
        except ValueError as e:
            raise GatewayError("Payment gateway returned a non-JSON response") from e

        if not data.get("id"):
            raise GatewayError("Payment gateway response did not include an order id")
        return GatewayOrder(
            id=data["id"],
            amount=int(data.get("amount", amount)),
            currency=data.get("currency", currency),
            receipt=data.get("receipt", receipt),
            status=data.get("status", "created"),
        )

    def close(self) -> None:
        self._client.close()


class DevMockGateway(PaymentGateway):
    """Local stand-in: fabricates order ids and signs with a known test secret."""

    name = "razorpay-mock"

    def __init__(self, key_id: str = "rzp_test_dev", key_secret: str = "dev_razorpay_secret"):
        self.key_id = key_id
        self.key_secret = key_secret

    def create_order(self, amount: int, currency: str, receipt: Optional[str] = None) -> GatewayOrder:
        order = GatewayOrder(
            id=f"dev_order_{secrets.token_hex(8)}",
            amount=amount,
            currency=currency,
            receipt=receipt,
        )
        logger.info("Created development payment order", extra={"order_id": order.id, "amount": amount})
        return order


class DisabledGateway(PaymentGateway):
    enabled = False
    name = "razorpay-disabled"

    def create_order(self, amount: int, currency: str, receipt: Optional[str] = None) -> GatewayOrder:
        raise GatewayError("Payment gateway is not configured")


def create_payment_gateway(settings: Settings) -> PaymentGateway:
    if settings.has_gateway_credentials:
        return RazorpayGateway(
            key_id=settings.RAZORPAY_KEY_ID.strip(),
            key_secret=settings.RAZORPAY_KEY_SECRET.strip(),
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
        )
    if settings.is_production:
        logger.error("RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET missing in production; payments disabled")
        return DisabledGateway()
    logger.warning("Razorpay credentials not set; using development mock gateway")
    return DevMockGateway()


@lru_cache()
def get_payment_gateway() -> PaymentGateway:
    return create_payment_gateway(app_settings)
