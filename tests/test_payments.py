import json
import time

from conftest import auth_headers, create_place

from spot2go.models import Booking
from spot2go.webhook_security import create_stripe_signature

SECRET = "whsec_test"


def post_webhook(client, event, signature=None, timestamp=None):
    payload = json.dumps(event).encode()
    header = signature or create_stripe_signature(SECRET, payload, timestamp)
    return client.post(
        "/api/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": header, "Content-Type": "application/json"},
    )


def test_create_intent_returns_mock_ids_in_cents(client, customer):
    response = client.post("/api/payments/create-intent", json={"amount": 12.5}, headers=auth_headers(customer))
    assert response.status_code == 200
    body = response.json()
    assert body["paymentIntentId"].startswith("pi_mock_")
    assert body["clientSecret"].startswith(body["paymentIntentId"])
    assert body["amount"] == 1250
    assert body["currency"] == "cad"


def test_create_intent_validates_amount(client, customer):
    headers = auth_headers(customer)
    assert client.post("/api/payments/create-intent", json={}, headers=headers).json()["detail"] == "Amount is required"
    zero = client.post("/api/payments/create-intent", json={"amount": 0}, headers=headers)
    assert zero.status_code == 400
    assert zero.json()["detail"] == "Amount must be greater than zero"


def test_create_intent_is_for_customers(client, owner):
    assert client.post("/api/payments/create-intent", json={"amount": 5}, headers=auth_headers(owner)).status_code == 403


def test_signed_webhook_is_acknowledged_without_touching_bookings(client, db, owner, customer, session_factory):
    place = create_place(db, owner)
    client.post(
        "/api/customers/bookings",
        json={"placeId": place.id, "amount": 10},
        headers=auth_headers(customer),
    )

    event = {"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_mock_123"}}}
    response = post_webhook(client, event)
    assert response.status_code == 200
    assert response.json() == {"received": True}

    session = session_factory()
    try:
        assert [b.status for b in session.query(Booking)] == ["pending"]
    finally:
        session.close()


def test_webhook_with_bad_signature_is_rejected(client):
    event = {"type": "payment_intent.succeeded"}
    response = post_webhook(client, event, signature=f"t={int(time.time())},v1=deadbeef")
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Webhook Error")


def test_webhook_without_signature_is_rejected(client):
    response = client.post("/api/payments/webhook", content=b"{}")
    assert response.status_code == 400


def test_stale_webhook_is_rejected(client):
    response = post_webhook(client, {"type": "payment_intent.succeeded"}, timestamp=int(time.time()) - 3600)
    assert response.status_code == 400
