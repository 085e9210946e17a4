from datetime import timedelta

from conftest import auth_headers

from spot2go.security_utils import create_access_token


def test_missing_token_is_unauthorized(client):
    response = client.get("/api/users/profile")
    assert response.status_code == 401
    assert response.json()["detail"] == "No token provided"


def test_invalid_token_is_forbidden(client):
    response = client.get("/api/users/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403


def test_expired_token_is_forbidden(client, customer):
    token = create_access_token(
        {"id": customer.id, "email": customer.email, "role": "customer", "name": customer.name},
        expires_delta=timedelta(seconds=-5),
    )
    response = client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_wrong_role_is_forbidden(client, customer):
    response = client.get("/api/owners/places", headers=auth_headers(customer))
    assert response.status_code == 403
    assert response.json()["detail"] == "Forbidden: You do not have the required permissions."


def test_unknown_role_in_token_is_forbidden(client, customer):
    token = create_access_token({"id": customer.id, "email": customer.email, "role": "superuser", "name": "x"})
    response = client.get("/api/customers/places", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_admin_routes_reject_owners(client, owner):
    assert client.get("/api/admin/places/stats", headers=auth_headers(owner)).status_code == 403
