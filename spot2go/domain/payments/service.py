"""Payment service - Mocked payment intents and webhook event handling

No payment provider is called. Intents are generated locally and webhook
events are only logged; bookings are never marked paid from here.
"""

import json
import logging
import secrets
from typing import Any, Optional

from fastapi import HTTPException

from .schemas import PaymentIntentResponse

logger = logging.getLogger(__name__)


def create_payment_intent(amount: Optional[float], currency: str, user_id: int) -> PaymentIntentResponse:
    if amount is None:
        raise HTTPException(status_code=400, detail="Amount is required")
    if amount <= 0:
        raise HTTPException(status_code=400, detail="Amount must be greater than zero")

    intent_id = f"pi_mock_{secrets.token_hex(12)}"
    amount_cents = int(round(amount * 100))
    logger.info(f"💳 Mock payment intent {intent_id} for user {user_id}: {amount_cents} {currency}")
    return PaymentIntentResponse(
        clientSecret=f"{intent_id}_secret_{secrets.token_hex(12)}",
        paymentIntentId=intent_id,
        amount=amount_cents,
        currency=currency.lower(),
    )


def parse_event(raw_body: bytes) -> dict[str, Any]:
    try:
        event = json.loads(raw_body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Webhook Error: invalid payload") from e
    if not isinstance(event, dict):
        raise HTTPException(status_code=400, detail="Webhook Error: invalid payload")
    return event


def handle_event(event: dict[str, Any]) -> None:
    event_type = event.get("type")
    obj = (event.get("data") or {}).get("object") or {}

    if event_type == "payment_intent.succeeded":
        logger.info(f"💰 Payment succeeded: {obj.get('id')}")
    elif event_type == "payment_intent.payment_failed":
        logger.warning(f"❌ Payment failed: {obj.get('id')}")
    else:
        logger.info(f"Unhandled payment event type {event_type}")
