"""
Webhook Security Module

Signature verification for the payment webhook:
- Constant-time signature comparison
- Timestamp validation against replays
"""

import hashlib
import hmac
import logging
import time
from typing import Optional

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

# Maximum age of webhook in seconds (5 minutes)
MAX_WEBHOOK_AGE_SECONDS = 300


def constant_time_compare(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return hmac.compare_digest(a, b)


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_timestamp(timestamp: Optional[str], max_age: int = MAX_WEBHOOK_AGE_SECONDS) -> bool:
    """Reject webhooks whose timestamp is missing, malformed or older than max_age"""
    try:
        webhook_time = int(timestamp)
    except (ValueError, TypeError):
        logger.warning(f"🚫 Invalid webhook timestamp format: {timestamp}")
        return False

    age = abs(int(time.time()) - webhook_time)
    if age > max_age:
        logger.warning(f"🚫 Webhook timestamp too old: {age}s (max: {max_age}s)")
        return False
    return True


def parse_stripe_signature(signature_header: str) -> dict[str, str]:
    elements = {}
    for item in signature_header.split(","):
        if "=" in item:
            key, value = item.split("=", 1)
            elements[key.strip()] = value.strip()
    return elements


async def verify_stripe_webhook(request: Request, secret: Optional[str]) -> bytes:
    """
    Verify a Stripe-style webhook signature and return the raw body.

    Header: 'Stripe-Signature' (format: "t=<timestamp>,v1=<signature>"),
    signature = HMAC-SHA256(secret, "<timestamp>.<body>").
    Raises 400 on any failure.
    """
    raw_body = await request.body()

    if not secret:
        logger.error("❌ STRIPE_WEBHOOK_SECRET not configured")
        raise HTTPException(status_code=400, detail="Webhook Error: signing secret not configured")

    signature_header = request.headers.get("Stripe-Signature", "")
    if not signature_header:
        logger.warning("🚫 Payment webhook missing signature header")
        raise HTTPException(status_code=400, detail="Webhook Error: missing signature")

    elements = parse_stripe_signature(signature_header)
    timestamp = elements.get("t")
    signature = elements.get("v1")
    if not timestamp or not signature:
        logger.warning("🚫 Payment webhook invalid signature format")
        raise HTTPException(status_code=400, detail="Webhook Error: invalid signature format")

    if not verify_timestamp(timestamp):
        raise HTTPException(status_code=400, detail="Webhook Error: timestamp outside tolerance")

    signed_payload = f"{timestamp}.".encode() + raw_body
    expected_signature = compute_hmac_sha256(secret, signed_payload)

    if not constant_time_compare(expected_signature, signature):
        logger.warning("🚫 Payment webhook signature mismatch")
        raise HTTPException(status_code=400, detail="Webhook Error: signature mismatch")

    logger.debug("✅ Payment webhook signature verified")
    return raw_body


def create_stripe_signature(secret: str, payload: bytes, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header value (used by tests and local tooling)"""
    timestamp = timestamp if timestamp is not None else int(time.time())
    sig = compute_hmac_sha256(secret, f"{timestamp}.".encode() + payload)
    return f"t={timestamp},v1={sig}"
