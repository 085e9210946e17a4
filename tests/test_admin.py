from conftest import auth_headers, create_place

from spot2go.models import PlaceStatus, UserDevice


def test_stats_count_rejected_only_in_total(client, db, owner, admin):
    create_place(db, owner, name="A", status=PlaceStatus.APPROVED)
    create_place(db, owner, name="B", status=PlaceStatus.PENDING)
    create_place(db, owner, name="C", status=PlaceStatus.PENDING)
    create_place(db, owner, name="D", status=PlaceStatus.REJECTED)

    response = client.get("/api/admin/places/stats", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json() == {"total": 4, "approved": 1, "pending": 2}


def test_pending_places_include_owner_contact(client, db, owner, admin):
    create_place(db, owner, name="Live")
    pending = create_place(db, owner, name="Waiting", status=PlaceStatus.PENDING)

    response = client.get("/api/admin/places/pending", headers=auth_headers(admin))
    [place] = response.json()
    assert place["id"] == pending.id
    assert place["owner"]["email"] == "owner@example.com"
    assert place["menuItems"] == []


def test_approving_a_place_notifies_the_owner(client, db, owner, admin, push):
    place = create_place(db, owner, status=PlaceStatus.PENDING)
    db.add(UserDevice(user_id=owner.id, fcm_token="owner-tablet"))
    db.commit()

    response = client.put(
        f"/api/admin/places/{place.id}/status", json={"status": "approved"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Place approved successfully"
    assert response.json()["place"]["status"] == "approved"

    [message] = push.multicasts
    assert message["tokens"] == ["owner-tablet"]
    assert message["data"] == {"placeId": str(place.id), "status": "approved"}


def test_rejected_place_can_be_approved_later(client, db, owner, admin):
    place = create_place(db, owner, status=PlaceStatus.REJECTED)
    response = client.put(
        f"/api/admin/places/{place.id}/status", json={"status": "approved"}, headers=auth_headers(admin)
    )
    assert response.json()["place"]["status"] == "approved"


def test_owner_without_devices_gets_no_push(client, db, owner, admin, push):
    place = create_place(db, owner, status=PlaceStatus.PENDING)
    response = client.put(
        f"/api/admin/places/{place.id}/status", json={"status": "rejected"}, headers=auth_headers(admin)
    )
    assert response.json()["message"] == "Place rejected successfully"
    assert push.multicasts == []


def test_invalid_status_is_checked_before_place_lookup(client, admin):
    response = client.put("/api/admin/places/999/status", json={"status": "pending"}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid status. Must be 'approved' or 'rejected'."


def test_status_of_missing_place_is_not_found(client, admin):
    response = client.put("/api/admin/places/999/status", json={"status": "approved"}, headers=auth_headers(admin))
    assert response.status_code == 404
