"""Razorpay Adapter — order creation and checkout signature verification.

Invariants:
    - verify() is constant-time and returns False (never raises) on bad input
    - Signature = hex(HMAC-SHA256(key_secret, f"{order_id}|{payment_id}"))
    - Order creation failures surface as PaymentGatewayError (502), never as a
      domain error
"""

import hashlib
import hmac
import logging

import httpx

from taskshare.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


class RazorpaySignatureVerifier:
    """Satisfies core.repository_protocols.PaymentVerifier."""

    def __init__(self, key_secret: str):
        self._key_secret = key_secret.encode("utf-8")

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(self._key_secret, message, hashlib.sha256).hexdigest()

    def verify(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not order_id or not payment_id or not signature:
            return False
        return hmac.compare_digest(
            self.expected_signature(order_id, payment_id), signature,
        )


class RazorpayClient:
    """Minimal Razorpay Orders API client."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.key_id = key_id
        self._auth = (key_id, key_secret)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        """POST /orders. Amount is in the currency's smallest unit."""
        payload = {"amount": amount, "currency": currency, "receipt": receipt}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, auth=self._auth,
                timeout=self.timeout, transport=self._transport,
            ) as client:
                response = await client.post("/orders", json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Razorpay rejected order: HTTP {e.response.status_code}",
                extra={"error_code": "PAYMENT_GATEWAY_ERROR"},
            )
            raise PaymentGatewayError(f"order creation rejected ({e.response.status_code})")
        except httpx.HTTPError as e:
            logger.error(f"Razorpay unreachable: {e}")
            raise PaymentGatewayError("gateway unreachable")

        order = response.json()
        logger.info("Payment order created", extra={"order_id": order.get("id")})
        return order
