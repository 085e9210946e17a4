"""Booking service - Calendar export for a customer's own bookings"""

from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from ...models import Booking
from ...schemas import TokenClaims
from ...services.calendar_service import build_booking_ics


class BookingService:
    def __init__(self, db: Session):
        self.db = db

    def get_own_booking(self, booking_id: int, user: TokenClaims) -> Booking:
        booking: Optional[Booking] = (
            self.db.query(Booking)
            .options(joinedload(Booking.place))
            .filter(Booking.id == booking_id, Booking.user_id == user.id)
            .first()
        )
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found.")
        return booking

    def calendar_file(self, booking_id: int, user: TokenClaims) -> tuple[str, bytes]:
        """Returns (filename, ics bytes)"""
        booking = self.get_own_booking(booking_id, user)
        if not (booking.date and booking.start_time and booking.end_time):
            raise HTTPException(
                status_code=400, detail="This booking has no scheduled time to add to a calendar."
            )
        return f"booking-{booking.ticket_id}.ics", build_booking_ics(booking, booking.place)
