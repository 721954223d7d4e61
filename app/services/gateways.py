"""Thin clients for the external settlement providers.

The card gateway is called synchronously over HTTP. UPI collections are
asynchronous: we only mint a reference and a ``upi://pay`` intent here and
wait for the provider's success callback.
"""
import logging
import uuid
from urllib.parse import urlencode

import requests
from flask import current_app

from app.services.errors import GatewayError, NetworkError
from app.services.money import to_major

logger = logging.getLogger(__name__)


class CardGateway:
    def __init__(self, base_url, api_key, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_config(cls, config=None):
        cfg = config or current_app.config
        return cls(cfg["CARD_GATEWAY_URL"], cfg.get("CARD_GATEWAY_KEY", ""), cfg.get("CARD_GATEWAY_TIMEOUT", 10))

    def charge(self, *, token: str, amount: int, reference: str) -> str:
        """Charge ``amount`` paise against a tokenised card; return the charge id."""
        try:
            resp = requests.post(
                f"{self.base_url}/charges",
                json={"token": token, "amount": amount, "currency": "INR", "reference": reference},
                headers={"Authorization": f"Bearer {self.api_key}", "Idempotency-Key": reference},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Card gateway unreachable for %s: %s", reference, e)
            raise NetworkError("Payment gateway unreachable, please retry") from e

        if resp.status_code >= 500:
            raise NetworkError("Payment gateway unavailable, please retry")
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 400 or body.get("status") != "succeeded":
            reason = body.get("decline_reason") or body.get("message") or "declined"
            logger.info("Card charge %s declined: %s", reference, reason)
            raise GatewayError(f"Card payment declined: {reason}")
        charge_id = body.get("id")
        if not charge_id:
            raise GatewayError("Payment gateway returned no charge id")
        return charge_id


def get_card_gateway():
    gw = current_app.extensions.get("card_gateway")
    if gw is None:
        gw = CardGateway.from_config()
    return gw


def new_reference(prefix, room_id, item_id, contributor_id) -> str:
    return f"{prefix}{room_id}_ITM{item_id}_USR{contributor_id}_{uuid.uuid4().hex[:12]}"


def upi_intent(reference_id: str, amount: int, room_id) -> str:
    cfg = current_app.config
    query = urlencode({
        "pa": cfg["UPI_PAYEE_VPA"],
        "pn": cfg["UPI_PAYEE_NAME"],
        "am": str(to_major(amount)),
        "cu": "INR",
        "tn": f"Group contribution Room {room_id}",
        "tr": reference_id,
    })
    return f"upi://pay?{query}"
