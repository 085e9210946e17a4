from conftest import auth_headers

from spot2go.models import UserDevice


def devices(session_factory):
    session = session_factory()
    try:
        return [(d.user_id, d.fcm_token) for d in session.query(UserDevice).order_by(UserDevice.id)]
    finally:
        session.close()


def test_register_device(client, customer, session_factory):
    response = client.post("/api/notifications/devices", json={"fcm_token": "tok-1"}, headers=auth_headers(customer))
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert devices(session_factory) == [(customer.id, "tok-1")]


def test_registering_twice_keeps_one_row(client, customer, session_factory):
    headers = auth_headers(customer)
    client.post("/api/notifications/devices", json={"fcm_token": "tok-1"}, headers=headers)
    client.post("/api/notifications/devices", json={"fcm_token": "tok-1"}, headers=headers)
    assert devices(session_factory) == [(customer.id, "tok-1")]


def test_token_already_held_by_another_user_is_left_alone(client, customer, owner, session_factory):
    first = client.post("/api/notifications/devices", json={"fcm_token": "shared"}, headers=auth_headers(customer))
    second = client.post("/api/notifications/devices", json={"fcm_token": "shared"}, headers=auth_headers(owner))
    assert first.json() == second.json() == {"ok": True}
    assert devices(session_factory) == [(customer.id, "shared")]


def test_missing_token_is_rejected(client, customer):
    response = client.post("/api/notifications/devices", json={}, headers=auth_headers(customer))
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing token"


def test_device_registration_requires_login(client):
    assert client.post("/api/notifications/devices", json={"fcm_token": "tok"}).status_code == 401
