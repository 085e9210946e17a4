"""Customer service - Place discovery, bookings, bookmarks and reviews"""

import logging
import secrets
import string
from datetime import date, timedelta
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...email_service import Mailer
from ...models import Booking, BookingStatus, Place, Review
from ...outbox import Outbox
from ...schemas import TokenClaims
from ...services.push_service import PushClient
from ..auth.repository import UserRepository
from ..notifications.service import NotificationService
from .repository import CustomerRepository
from .schemas import AvailableSlot, BookingCreate, ReviewCreate

logger = logging.getLogger(__name__)

SLOT_HOURS = 2
SLOT_DAYS = 7
TICKET_PREFIX = "SPOT2GO-"
TICKET_ALPHABET = string.ascii_uppercase + string.digits
TICKET_LENGTH = 9


def generate_ticket_id() -> str:
    return TICKET_PREFIX + "".join(secrets.choice(TICKET_ALPHABET) for _ in range(TICKET_LENGTH))


def build_available_slots(
    place_id: int,
    hours: dict[str, str],
    booked: set[tuple[str, str]],
    today: date,
) -> list[AvailableSlot]:
    """2-hour slots between opening and closing hour for the next 7 days.

    A slot is unavailable when a pending or paid booking starts at the same
    date and time. Minutes in the opening hours are ignored.
    """
    start_hour = int(hours["start"].split(":")[0])
    closing_hour = int(hours["end"].split(":")[0])

    slots = []
    for offset in range(SLOT_DAYS):
        day = (today + timedelta(days=offset)).isoformat()
        hour = start_hour
        while hour + SLOT_HOURS <= closing_hour:
            start = f"{hour:02d}:00"
            slots.append(
                AvailableSlot(
                    id=f"{place_id}-{day}T{start}",
                    date=day,
                    startTime=start,
                    endTime=f"{hour + SLOT_HOURS:02d}:00",
                    available=(day, start) not in booked,
                )
            )
            hour += SLOT_HOURS
    return slots


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()
        self.users = UserRepository()

    # ============================================================================
    # PLACES
    # ============================================================================

    def list_places(self) -> list[Place]:
        """Approved places only, newest first"""
        return self.repo.get_approved_places(self.db)

    def get_place(self, place_id: int, today: Optional[date] = None) -> tuple[Place, Optional[list[AvailableSlot]]]:
        """An approved place plus its slot grid when it takes reservations"""
        place = self.repo.get_approved_place(self.db, place_id)
        if not place:
            raise HTTPException(status_code=404, detail="Place not found or not approved")

        hours = place.reservable_hours or {}
        if not (place.reservable and hours.get("start") and hours.get("end")):
            return place, None

        today = today or date.today()
        rows = self.repo.get_booked_slots(
            self.db, place.id, today, today + timedelta(days=SLOT_DAYS)
        )
        booked = {
            (d.isoformat(), t.strftime("%H:%M")) for d, t in rows if d is not None and t is not None
        }
        return place, build_available_slots(place.id, hours, booked, today)

    # ============================================================================
    # BOOKINGS
    # ============================================================================

    def create_booking(
        self,
        data: BookingCreate,
        user: TokenClaims,
        outbox: Outbox,
        mailer: Mailer,
        push: PushClient,
    ) -> Booking:
        """Record a pending booking.

        The amount is taken as sent and no slot conflict is checked. The
        confirmation email and the owner push are queued after the commit.
        """
        place = self.repo.get_place(self.db, data.placeId)
        if not place:
            raise HTTPException(status_code=404, detail="Place not found")

        ticket_id = generate_ticket_id()
        while self.repo.ticket_exists(self.db, ticket_id):
            ticket_id = generate_ticket_id()

        booking = self.repo.create_booking(
            self.db,
            user_id=user.id,
            place_id=place.id,
            status=BookingStatus.PENDING.value,
            amount=data.amount,
            date=data.date,
            start_time=data.startTime,
            end_time=data.endTime,
            ticket_id=ticket_id,
        )
        logger.info(f"✅ Booking {booking.ticket_id} created by user {user.id} for place {place.id}")

        customer = self.users.get_by_id(self.db, user.id)
        if customer and customer.email:
            outbox.enqueue(
                "booking_confirmation_email",
                mailer.send_booking_confirmation_email,
                customer.email,
                customer.name,
                place.name,
                booking.ticket_id,
                date=booking.date.isoformat() if booking.date else None,
                start_time=booking.start_time.strftime("%H:%M") if booking.start_time else None,
                end_time=booking.end_time.strftime("%H:%M") if booking.end_time else None,
            )

        NotificationService(self.db).send_to_user(
            place.owner_id,
            "New booking",
            f"{customer.name if customer else 'A customer'} booked {place.name}",
            outbox,
            push,
            data={"bookingId": str(booking.id), "ticketId": booking.ticket_id},
        )
        return booking

    def list_bookings(self, user: TokenClaims) -> list[Booking]:
        return self.repo.get_bookings_for_user(self.db, user.id)

    def get_booking_by_ticket(self, ticket_id: str, user: TokenClaims) -> Booking:
        booking = self.repo.get_booking_by_ticket(self.db, ticket_id, user.id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found.")
        return booking

    # ============================================================================
    # BOOKMARKS
    # ============================================================================

    def list_bookmark_ids(self, user: TokenClaims) -> list[str]:
        return [str(place_id) for place_id in self.repo.get_bookmarked_place_ids(self.db, user.id)]

    def list_bookmarked_places(self, user: TokenClaims) -> list[Place]:
        return self.repo.get_bookmarked_places(self.db, user.id)

    def add_bookmark(self, place_id: Optional[int], user: TokenClaims) -> tuple[bool, dict[str, Any]]:
        """Returns (created, body); bookmarking twice is not an error"""
        if not place_id:
            raise HTTPException(status_code=400, detail="placeId is required.")
        if not self.repo.get_place(self.db, place_id):
            raise HTTPException(status_code=404, detail="Place not found")

        if self.repo.get_bookmark(self.db, user.id, place_id):
            return False, {"message": "Already bookmarked.", "placeId": place_id}

        try:
            self.repo.create_bookmark(self.db, user.id, place_id)
        except IntegrityError:
            # Lost a race with a concurrent toggle
            self.db.rollback()
            return False, {"message": "Already bookmarked.", "placeId": place_id}
        return True, {"message": "Bookmark added.", "placeId": place_id}

    def remove_bookmark(self, place_id: int, user: TokenClaims) -> dict[str, Any]:
        deleted = self.repo.delete_bookmark(self.db, user.id, place_id)
        if not deleted:
            return {"message": "Bookmark not found or already removed.", "placeId": place_id}
        return {"message": "Bookmark removed.", "placeId": place_id}

    # ============================================================================
    # REVIEWS
    # ============================================================================

    def create_review(self, data: ReviewCreate, user: TokenClaims) -> Review:
        if not data.placeId or data.rating is None:
            raise HTTPException(status_code=400, detail="Place ID and rating are required.")
        if not 1 <= data.rating <= 5:
            raise HTTPException(status_code=400, detail="Rating must be between 1 and 5.")

        place = self.repo.get_place(self.db, data.placeId)
        if not place:
            raise HTTPException(status_code=404, detail="Place not found")

        review = self.repo.create_review_and_update_rating(
            self.db, place, user.id, data.rating, data.comment
        )
        logger.info(
            f"✅ Review {review.id} on place {place.id}: rating now {place.rating} ({place.review_count} reviews)"
        )
        return review

    def list_reviews(self, user: TokenClaims) -> list[Review]:
        return self.repo.get_reviews_for_user(self.db, user.id)
