"""Admin repository - Moderation queries"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Place, PlaceStatus


class AdminRepository:
    @staticmethod
    def count_places_by_status(db: Session) -> dict[str, int]:
        rows = db.query(Place.status, func.count(Place.id)).group_by(Place.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def get_pending_places(db: Session) -> list[Place]:
        """Oldest submissions first"""
        return (
            db.query(Place)
            .options(joinedload(Place.owner), selectinload(Place.menu_items))
            .filter(Place.status == PlaceStatus.PENDING.value)
            .order_by(Place.created_at.asc(), Place.id.asc())
            .all()
        )

    @staticmethod
    def get_place(db: Session, place_id: int) -> Optional[Place]:
        return db.query(Place).filter(Place.id == place_id).first()

    @staticmethod
    def set_status(db: Session, place: Place, status: str) -> Place:
        place.status = status
        db.commit()
        db.refresh(place)
        return place
