from conftest import auth_headers, create_user

from spot2go.models import User


def test_profile_hides_password_and_reset_fields(client, customer):
    response = client.get("/api/users/profile", headers=auth_headers(customer))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "customer@example.com"
    assert body["role"] == "customer"
    assert "password" not in body
    assert "passwordResetToken" not in body


def test_update_profile_normalizes_phone_and_escapes_name(client, customer):
    response = client.put(
        "/api/users/profile",
        json={"name": "  <b>Casey</b> ", "phone": "(416) 555-0199"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "&lt;b&gt;Casey&lt;/b&gt;"
    assert user["phone"] == "+14165550199"


def test_omitted_phone_is_kept_and_empty_phone_clears(client, db, customer):
    headers = auth_headers(customer)
    client.put("/api/users/profile", json={"name": "Casey", "phone": "+44 20 7946 0958"}, headers=headers)

    kept = client.put("/api/users/profile", json={"name": "Casey C"}, headers=headers)
    assert kept.json()["user"]["phone"] == "+442079460958"

    cleared = client.put("/api/users/profile", json={"name": "Casey C", "phone": ""}, headers=headers)
    assert cleared.json()["user"]["phone"] is None


def test_update_profile_validation(client, customer):
    headers = auth_headers(customer)
    assert client.put("/api/users/profile", json={"name": "   "}, headers=headers).status_code == 400
    assert client.put("/api/users/profile", json={"name": "x" * 51}, headers=headers).status_code == 400
    bad_phone = client.put("/api/users/profile", json={"name": "Casey", "phone": "12345"}, headers=headers)
    assert bad_phone.status_code == 400
    assert bad_phone.json()["detail"] == "Invalid phone number format"


def test_settings_merge_into_notifications(client, customer):
    headers = auth_headers(customer)
    client.put("/api/users/settings", json={"notifications": {"email": True, "push": False}}, headers=headers)
    response = client.put("/api/users/settings", json={"notifications": {"push": True}}, headers=headers)
    assert response.status_code == 200
    assert response.json()["settings"] == {"notifications": {"email": True, "push": True}}


def test_settings_reject_unknown_keys(client, customer):
    response = client.put("/api/users/settings", json={"notifications": {"sms": True}}, headers=auth_headers(customer))
    assert response.status_code == 400


def change(client, user, current, new, confirm=None):
    return client.put(
        "/api/users/password",
        json={"currentPassword": current, "newPassword": new, "confirmPassword": confirm or new},
        headers=auth_headers(user),
    )


def test_change_password_then_login_with_new_one(client, customer, mailer):
    response = change(client, customer, "Secret123", "Brand1new")
    assert response.status_code == 200
    assert response.json()["message"] == "Password updated successfully"
    assert mailer.of_kind("password_changed")

    login = client.post("/api/auth/login", json={"email": "customer@example.com", "password": "Brand1new"})
    assert login.status_code == 200


def test_change_password_rules(client, customer):
    assert change(client, customer, "wrong", "Brand1new").status_code == 401
    assert change(client, customer, "Secret123", "short1A").json()["detail"] == "New password must be at least 8 characters"
    assert change(client, customer, "Secret123", "nouppercase1").json()["detail"] == "Password must contain an uppercase letter"
    assert change(client, customer, "Secret123", "NoDigitsHere").json()["detail"] == "Password must contain a number"
    mismatch = change(client, customer, "Secret123", "Brand1new", confirm="Brand1neW")
    assert mismatch.json()["detail"] == "New passwords do not match"


def test_change_password_is_refused_for_social_accounts(client, db):
    social = create_user(db, email="g@example.com", password="Secret123", provider="google", provider_id="g-9")
    response = change(client, social, "Secret123", "Brand1new")
    assert response.status_code == 400


def test_profile_of_deleted_user_is_not_found(client, db, customer):
    headers = auth_headers(customer)
    db.delete(db.get(User, customer.id))
    db.commit()
    assert client.get("/api/users/profile", headers=headers).status_code == 404
