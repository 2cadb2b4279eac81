"""
PayMongo Payment Link Service
Creates hosted payment links and parses PayMongo webhook deliveries
"""

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

import httpx

from ..config import (
    HTTP_TIMEOUT_SECONDS,
    PAYMENT_CURRENCY,
    PAYMENT_REMARKS,
    PAYMONGO_API_URL,
    PAYMONGO_SECRET_KEY,
    PAYMONGO_WEBHOOK_SECRET,
)
from ..exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

LINK_PAYMENT_PAID = "link.payment.paid"


@dataclass(frozen=True)
class PaymentLink:
    payment_id: str
    payment_url: str


def to_minor_units(amount: Union[int, float, str, Decimal]) -> int:
    """Convert a major-currency amount (e.g. 300.50 PHP) to centavos"""
    value = Decimal(str(amount))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PayMongoService:
    """Thin async client for the PayMongo Links API"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        api_url: str = PAYMONGO_API_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else PAYMONGO_SECRET_KEY
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

        if not self.secret_key:
            logger.warning("PAYMONGO_SECRET_KEY not set; payment link creation will fail until configured")

    def is_available(self) -> bool:
        return bool(self.secret_key)

    async def create_link(
        self,
        amount: Union[int, float, str, Decimal],
        description: str,
        name: str,
        email: str,
    ) -> PaymentLink:
        """
        Create a hosted payment link

        Args:
            amount: Amount in major currency units (PHP), converted to centavos
            description: Line shown on the checkout page
            name: Billing name
            email: Billing email

        Returns:
            PaymentLink with the PayMongo link id and checkout URL
        """
        if not self.is_available():
            raise PaymentGatewayError("Payment gateway not configured")

        amount_minor = to_minor_units(amount)
        payload = {
            "data": {
                "attributes": {
                    "amount": amount_minor,
                    "description": description,
                    "remarks": PAYMENT_REMARKS,
                    "currency": PAYMENT_CURRENCY,
                    "billing": {"name": name, "email": email},
                }
            }
        }

        logger.info(f"💳 Creating PayMongo link: {description} ({amount_minor} {PAYMENT_CURRENCY} minor units)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as http_client:
                response = await http_client.post(
                    f"{self.api_url}/links",
                    json=payload,
                    auth=(self.secret_key, ""),
                    headers={"accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ PayMongo request failed: {e}")
            raise PaymentGatewayError(f"PayMongo API error: {str(e)}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            detail = _first_error_detail(data) or "Unknown error"
            logger.error(f"❌ PayMongo API error ({response.status_code}): {detail}")
            raise PaymentGatewayError(f"PayMongo API error: {detail}")

        link = data.get("data", data)
        attributes = link.get("attributes", {})
        payment_id = link.get("id")
        payment_url = attributes.get("checkout_url") or attributes.get("url")

        if not payment_id or not payment_url:
            logger.error(f"❌ PayMongo response missing link id/url: {data}")
            raise PaymentGatewayError("PayMongo API error: response missing payment link")

        logger.info(f"✅ PayMongo link created: {payment_id}")
        return PaymentLink(payment_id=payment_id, payment_url=payment_url)


def _first_error_detail(data: dict) -> Optional[str]:
    errors = data.get("errors") if isinstance(data, dict) else None
    if errors and isinstance(errors, list):
        return errors[0].get("detail")
    return None


def parse_webhook_event(raw_body: bytes) -> dict:
    """
    Parse a raw PayMongo webhook body

    Returns the event attributes: {"type": ..., "data": {...}}
    Raises ValueError for malformed payloads.
    """
    payload = json.loads(raw_body.decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Webhook payload is not a JSON object")
    attributes = payload.get("data", {}).get("attributes")
    if not isinstance(attributes, dict):
        raise ValueError("Webhook payload missing data.attributes")
    return attributes


def extract_link_id(event: dict) -> Optional[str]:
    """Link id for link.payment.paid events (data.attributes.data.id)"""
    data = event.get("data")
    if isinstance(data, dict):
        return data.get("id")
    return None


def verify_webhook_signature(raw_body: bytes, signature_header: Optional[str]) -> bool:
    """
    Verify the Paymongo-Signature header

    Header format: t=<timestamp>,te=<test signature>,li=<live signature>
    Signature: HMAC-SHA256(webhook_secret, f"{t}.{raw_body}") as hex
    """
    if not PAYMONGO_WEBHOOK_SECRET:
        logger.warning("⚠️ PAYMONGO_WEBHOOK_SECRET not configured, skipping verification")
        return True

    if not signature_header:
        logger.warning("⚠️ Missing Paymongo-Signature header")
        return False

    parts = dict(
        item.split("=", 1) for item in signature_header.split(",") if "=" in item
    )
    timestamp = parts.get("t")
    if not timestamp:
        return False

    message = timestamp.encode("utf-8") + b"." + raw_body
    expected = hmac.new(PAYMONGO_WEBHOOK_SECRET.encode("utf-8"), message, hashlib.sha256).hexdigest()

    return any(
        hmac.compare_digest(expected, parts[key]) for key in ("li", "te") if parts.get(key)
    )


paymongo_service = PayMongoService()


def get_paymongo_service() -> PayMongoService:
    """Dependency returning the shared PayMongo client"""
    return paymongo_service
