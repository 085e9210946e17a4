import json

from conftest import auth_headers, create_place, create_user

from spot2go.models import Place, PlaceStatus, Role

PNG = ("photo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")


def place_form(**overrides):
    data = {
        "name": "Study Hall",
        "type": "library",
        "description": "Quiet tables",
        "amenities": "wifi, outlets ,coffee",
        "location": json.dumps({"address": "10 King St", "lat": 43.6, "lng": -79.4}),
        "reservable": "true",
        "reservableHours": json.dumps({"start": "09:00", "end": "17:00"}),
        "maxCapacity": "4",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


def fresh_place(session_factory, place_id):
    session = session_factory()
    try:
        return session.get(Place, place_id)
    finally:
        session.close()


# ============================================================================
# CREATE
# ============================================================================


def test_create_place_without_images_is_rejected(client, owner):
    response = client.post("/api/owners/places", data=place_form(), headers=auth_headers(owner))
    assert response.status_code == 400
    assert response.json()["detail"] == "At least one image is required."


def test_create_place_uploads_images_and_starts_pending(client, owner, storage):
    response = client.post(
        "/api/owners/places",
        data=place_form(),
        files=[("images", PNG), ("images", ("b.jpg", b"jpeg", "image/jpeg"))],
        headers=auth_headers(owner),
    )
    assert response.status_code == 201
    place = response.json()["place"]
    assert place["status"] == "pending"
    assert place["ownerId"] == owner.id
    assert place["amenities"] == ["wifi", "outlets", "coffee"]
    assert place["location"]["address"] == "10 King St"
    assert place["reservableHours"] == {"start": "09:00", "end": "17:00"}
    assert place["maxCapacity"] == 4
    assert len(storage.uploads) == 2
    assert place["images"][0].startswith("https://images.test/")


def test_create_place_ignores_hours_when_not_reservable(client, owner):
    response = client.post(
        "/api/owners/places",
        data=place_form(reservable="false"),
        files=[("images", PNG)],
        headers=auth_headers(owner),
    )
    place = response.json()["place"]
    assert place["reservable"] is False
    assert place["reservableHours"] is None
    assert place["maxCapacity"] == 1


def test_create_place_with_bad_location_is_rejected(client, owner, storage):
    response = client.post(
        "/api/owners/places",
        data=place_form(location="{not json"),
        files=[("images", PNG)],
        headers=auth_headers(owner),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid location format."
    assert storage.uploads == []


def test_create_place_with_bad_reservable_hours_is_rejected(client, owner):
    response = client.post(
        "/api/owners/places",
        data=place_form(reservableHours="nine to five"),
        files=[("images", PNG)],
        headers=auth_headers(owner),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid reservable hours format."


def test_create_place_rejects_more_than_five_images(client, owner):
    files = [("images", (f"{i}.png", b"png", "image/png")) for i in range(6)]
    response = client.post("/api/owners/places", data=place_form(), files=files, headers=auth_headers(owner))
    assert response.status_code == 400


def test_create_place_rejects_non_image_upload(client, owner):
    response = client.post(
        "/api/owners/places",
        data=place_form(),
        files=[("images", ("notes.pdf", b"%PDF", "application/pdf"))],
        headers=auth_headers(owner),
    )
    assert response.status_code == 400


def test_rejected_image_in_a_submission_stores_nothing(client, owner, storage):
    response = client.post(
        "/api/owners/places",
        data=place_form(),
        files=[("images", PNG), ("images", ("b.gif", b"GIF89a", "image/gif"))],
        headers=auth_headers(owner),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid file type. Only JPEG and PNG images are allowed."
    assert storage.uploads == []


def test_rejected_image_on_edit_stores_nothing_and_keeps_old_images(client, db, owner, storage):
    place = create_place(db, owner)
    response = client.put(
        f"/api/owners/places/{place.id}",
        files=[("images", PNG), ("images", ("b.gif", b"GIF89a", "image/gif"))],
        headers=auth_headers(owner),
    )
    assert response.status_code == 400
    assert storage.uploads == []

    detail = client.get(f"/api/owners/places/{place.id}", headers=auth_headers(owner)).json()
    assert detail["images"] == ["https://images.test/a.jpg"]


def test_customers_cannot_create_places(client, customer):
    response = client.post("/api/owners/places", data=place_form(), files=[("images", PNG)], headers=auth_headers(customer))
    assert response.status_code == 403


# ============================================================================
# UPDATE
# ============================================================================


def test_editing_an_approved_place_sends_it_back_to_pending(client, db, owner, session_factory):
    place = create_place(db, owner, status=PlaceStatus.APPROVED)

    response = client.put(
        f"/api/owners/places/{place.id}", data={"description": "Now with more seats"}, headers=auth_headers(owner)
    )
    assert response.status_code == 200
    body = response.json()["place"]
    assert body["status"] == "pending"
    assert body["description"] == "Now with more seats"
    # untouched fields keep their values
    assert body["name"] == "Quiet Corner"
    assert body["images"] == ["https://images.test/a.jpg"]

    assert fresh_place(session_factory, place.id).status == PlaceStatus.PENDING.value


def test_new_images_replace_the_old_set(client, db, owner):
    place = create_place(db, owner)
    response = client.put(f"/api/owners/places/{place.id}", files=[("images", PNG)], headers=auth_headers(owner))
    assert response.status_code == 200
    images = response.json()["place"]["images"]
    assert len(images) == 1
    assert images[0] != "https://images.test/a.jpg"


def test_sequential_edits_last_write_wins(client, db, owner, session_factory):
    place = create_place(db, owner)
    headers = auth_headers(owner)

    first = client.put(f"/api/owners/places/{place.id}", data={"name": "First Name"}, headers=headers)
    second = client.put(f"/api/owners/places/{place.id}", data={"name": "Second Name"}, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert fresh_place(session_factory, place.id).name == "Second Name"


def test_edit_of_missing_place_is_not_found(client, owner):
    response = client.put("/api/owners/places/999", data={"name": "x"}, headers=auth_headers(owner))
    assert response.status_code == 404


def test_edit_of_someone_elses_place_is_forbidden(client, db, owner):
    other = create_user(db, email="other-owner@example.com", role=Role.OWNER)
    place = create_place(db, other)
    response = client.put(f"/api/owners/places/{place.id}", data={"name": "Mine now"}, headers=auth_headers(owner))
    assert response.status_code == 403


def test_turning_off_reservations_clears_hours(client, db, owner):
    place = create_place(db, owner, reservable=True, reservable_hours={"start": "08:00", "end": "12:00"}, max_capacity=3)
    response = client.put(f"/api/owners/places/{place.id}", data={"reservable": "false"}, headers=auth_headers(owner))
    body = response.json()["place"]
    assert body["reservable"] is False
    assert body["reservableHours"] is None
    assert body["maxCapacity"] == 1


# ============================================================================
# LISTING, MENU, BOOKINGS
# ============================================================================


def test_owner_sees_only_their_places(client, db, owner):
    other = create_user(db, email="other-owner@example.com", role=Role.OWNER)
    mine = create_place(db, owner, name="Mine", status=PlaceStatus.PENDING)
    create_place(db, other, name="Theirs")

    response = client.get("/api/owners/places", headers=auth_headers(owner))
    assert [p["id"] for p in response.json()] == [mine.id]


def test_menu_items_and_bundles(client, db, owner):
    place = create_place(db, owner)
    headers = auth_headers(owner)

    latte = client.post(f"/api/owners/places/{place.id}/menu", json={"name": "Latte", "price": 4.5}, headers=headers)
    scone = client.post(f"/api/owners/places/{place.id}/menu", json={"name": "Scone", "price": 3}, headers=headers)
    assert latte.status_code == 201
    latte_id = latte.json()["item"]["id"]
    scone_id = scone.json()["item"]["id"]

    bundle = client.post(
        f"/api/owners/places/{place.id}/bundles",
        json={"name": "Breakfast", "price": 7, "items": [latte_id, scone_id]},
        headers=headers,
    )
    assert bundle.status_code == 201
    assert sorted(i["menuItemId"] for i in bundle.json()["bundle"]["items"]) == sorted([latte_id, scone_id])

    detail = client.get(f"/api/owners/places/{place.id}", headers=headers).json()
    assert [m["name"] for m in detail["menuItems"]] == ["Latte", "Scone"]
    assert detail["bundles"][0]["name"] == "Breakfast"


def test_bundle_with_foreign_menu_item_is_rejected(client, db, owner):
    place = create_place(db, owner)
    other_place = create_place(db, owner, name="Other")
    headers = auth_headers(owner)
    item_id = client.post(f"/api/owners/places/{other_place.id}/menu", json={"name": "Tea", "price": 2}, headers=headers).json()["item"]["id"]

    response = client.post(
        f"/api/owners/places/{place.id}/bundles", json={"name": "Mix", "price": 5, "items": [item_id]}, headers=headers
    )
    assert response.status_code == 400


def test_menu_item_on_someone_elses_place_is_forbidden(client, db, owner):
    other = create_user(db, email="other-owner@example.com", role=Role.OWNER)
    place = create_place(db, other)
    response = client.post(f"/api/owners/places/{place.id}/menu", json={"name": "Tea", "price": 2}, headers=auth_headers(owner))
    assert response.status_code == 403


def test_owner_bookings_include_booker_contact(client, db, owner, customer):
    place = create_place(db, owner)
    booked = client.post(
        "/api/customers/bookings",
        json={"placeId": place.id, "amount": 10, "date": "2030-01-02", "startTime": "10:00", "endTime": "12:00"},
        headers=auth_headers(customer),
    )
    assert booked.status_code == 201

    response = client.get("/api/owners/bookings", headers=auth_headers(owner))
    assert response.status_code == 200
    [booking] = response.json()
    assert booking["place"]["name"] == "Quiet Corner"
    assert booking["user"]["email"] == "customer@example.com"
