from icalendar import Calendar

from conftest import auth_headers, create_place, create_user


def test_calendar_file_for_own_booking(client, db, owner, customer):
    place = create_place(db, owner)
    booking = client.post(
        "/api/customers/bookings",
        json={"placeId": place.id, "amount": 20, "date": "2030-03-04", "startTime": "14:00", "endTime": "16:00"},
        headers=auth_headers(customer),
    ).json()["booking"]

    response = client.get(f"/api/bookings/{booking['id']}/calendar", headers=auth_headers(customer))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert f'filename="booking-{booking["ticketId"]}.ics"' in response.headers["content-disposition"]

    [event] = Calendar.from_ical(response.content).walk("VEVENT")
    assert str(event["summary"]) == "Booking at Quiet Corner"
    assert str(event["location"]) == "1 Main St"
    assert booking["ticketId"] in str(event["description"])
    assert event.decoded("dtstart").hour == 14
    assert event.decoded("dtend").hour == 16


def test_calendar_of_someone_elses_booking_is_not_found(client, db, owner, customer):
    place = create_place(db, owner)
    booking_id = client.post(
        "/api/customers/bookings",
        json={"placeId": place.id, "date": "2030-03-04", "startTime": "14:00", "endTime": "16:00"},
        headers=auth_headers(customer),
    ).json()["booking"]["id"]

    stranger = create_user(db, email="stranger@example.com")
    assert client.get(f"/api/bookings/{booking_id}/calendar", headers=auth_headers(stranger)).status_code == 404


def test_unscheduled_booking_has_no_calendar(client, db, owner, customer):
    place = create_place(db, owner)
    booking_id = client.post(
        "/api/customers/bookings", json={"placeId": place.id, "amount": 5}, headers=auth_headers(customer)
    ).json()["booking"]["id"]

    assert client.get(f"/api/bookings/{booking_id}/calendar", headers=auth_headers(customer)).status_code == 400
