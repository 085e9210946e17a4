"""
Calendar Service
Builds .ics files so customers can add a booking to their own calendar
"""

import logging
from datetime import datetime, timezone

from icalendar import Calendar, Event, vCalAddress, vText

from ..config import FRONTEND_URL
from ..models import Booking, Place

logger = logging.getLogger(__name__)

ORGANIZER_NAME = "Spot2Go"
ORGANIZER_EMAIL = "noreply@spot2go.app"


def build_booking_ics(booking: Booking, place: Place) -> bytes:
    """Single-event calendar for a booking. Date, start and end time must be set."""
    cal = Calendar()
    cal.add("prodid", "-//Spot2Go//Bookings//EN")
    cal.add("version", "2.0")

    event = Event()
    event.add("uid", f"{booking.ticket_id}@spot2go.app")
    event.add("dtstamp", datetime.now(timezone.utc))
    event.add("dtstart", datetime.combine(booking.date, booking.start_time))
    event.add("dtend", datetime.combine(booking.date, booking.end_time))
    event.add("summary", f"Booking at {place.name}")
    event.add("description", f"Your Spot2Go booking for {place.name}. Ticket ID: {booking.ticket_id}")

    address = (place.location or {}).get("address")
    if address:
        event.add("location", address)

    event.add("url", f"{FRONTEND_URL}/places/{place.id}")
    event.add("status", "CONFIRMED")

    organizer = vCalAddress(f"MAILTO:{ORGANIZER_EMAIL}")
    organizer.params["cn"] = vText(ORGANIZER_NAME)
    event["organizer"] = organizer

    cal.add_component(event)
    logger.info(f"📅 Built calendar file for booking {booking.ticket_id}")
    return cal.to_ical()
