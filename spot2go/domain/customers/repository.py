"""Customer repository - Database operations for discovery, bookings, bookmarks and reviews"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Booking, BookingStatus, Place, PlaceStatus, Review, UserBookmark

# Bookings that hold a slot for availability display
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.PAID.value)


class CustomerRepository:
    """Repository for customer-side database operations"""

    # ============================================================================
    # PLACES
    # ============================================================================

    @staticmethod
    def get_approved_places(db: Session) -> list[Place]:
        return (
            db.query(Place)
            .filter(Place.status == PlaceStatus.APPROVED.value)
            .order_by(Place.created_at.desc(), Place.id.desc())
            .all()
        )

    @staticmethod
    def get_approved_place(db: Session, place_id: int) -> Optional[Place]:
        return (
            db.query(Place)
            .options(
                selectinload(Place.menu_items),
                joinedload(Place.owner),
                selectinload(Place.reviews).joinedload(Review.user),
            )
            .filter(Place.id == place_id, Place.status == PlaceStatus.APPROVED.value)
            .first()
        )

    @staticmethod
    def get_place(db: Session, place_id: int) -> Optional[Place]:
        return db.query(Place).filter(Place.id == place_id).first()

    # ============================================================================
    # BOOKINGS
    # ============================================================================

    @staticmethod
    def get_booked_slots(db: Session, place_id: int, start: date, end: date) -> list[tuple]:
        """(date, start_time) of slot-holding bookings with start <= date < end"""
        return (
            db.query(Booking.date, Booking.start_time)
            .filter(
                Booking.place_id == place_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                Booking.date >= start,
                Booking.date < end,
            )
            .all()
        )

    @staticmethod
    def ticket_exists(db: Session, ticket_id: str) -> bool:
        return db.query(Booking.id).filter(Booking.ticket_id == ticket_id).first() is not None

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_bookings_for_user(db: Session, user_id: int) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.place))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_booking_by_ticket(db: Session, ticket_id: str, user_id: int) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.place), joinedload(Booking.user))
            .filter(Booking.ticket_id == ticket_id, Booking.user_id == user_id)
            .first()
        )

    # ============================================================================
    # BOOKMARKS
    # ============================================================================

    @staticmethod
    def get_bookmarked_place_ids(db: Session, user_id: int) -> list[int]:
        rows = (
            db.query(UserBookmark.place_id)
            .filter(UserBookmark.user_id == user_id)
            .order_by(UserBookmark.created_at.desc())
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def get_bookmarked_places(db: Session, user_id: int) -> list[Place]:
        return (
            db.query(Place)
            .join(UserBookmark, UserBookmark.place_id == Place.id)
            .filter(UserBookmark.user_id == user_id, Place.status == PlaceStatus.APPROVED.value)
            .order_by(Place.created_at.desc(), Place.id.desc())
            .all()
        )

    @staticmethod
    def get_bookmark(db: Session, user_id: int, place_id: int) -> Optional[UserBookmark]:
        return (
            db.query(UserBookmark)
            .filter(UserBookmark.user_id == user_id, UserBookmark.place_id == place_id)
            .first()
        )

    @staticmethod
    def create_bookmark(db: Session, user_id: int, place_id: int) -> UserBookmark:
        bookmark = UserBookmark(user_id=user_id, place_id=place_id)
        db.add(bookmark)
        db.commit()
        return bookmark

    @staticmethod
    def delete_bookmark(db: Session, user_id: int, place_id: int) -> int:
        deleted = (
            db.query(UserBookmark)
            .filter(UserBookmark.user_id == user_id, UserBookmark.place_id == place_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    # ============================================================================
    # REVIEWS
    # ============================================================================

    @staticmethod
    def create_review_and_update_rating(
        db: Session, place: Place, user_id: int, rating: int, comment: Optional[str]
    ) -> Review:
        """Insert the review and recompute the place's average in one transaction"""
        try:
            review = Review(user_id=user_id, place_id=place.id, rating=rating, comment=comment)
            db.add(review)
            db.flush()

            count, average = (
                db.query(func.count(Review.id), func.avg(Review.rating))
                .filter(Review.place_id == place.id)
                .one()
            )
            place.review_count = int(count or 0)
            place.rating = round(float(average or 0), 1)

            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(review)
        return review

    @staticmethod
    def get_reviews_for_user(db: Session, user_id: int) -> list[Review]:
        return (
            db.query(Review)
            .options(joinedload(Review.place))
            .filter(Review.user_id == user_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )
