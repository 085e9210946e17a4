"""Owner repository - Database operations for places, menus and owner bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Booking, Bundle, BundleItem, MenuItem, Place


class OwnerRepository:
    """Repository for owner-side database operations"""

    @staticmethod
    def get_place(db: Session, place_id: int) -> Optional[Place]:
        return db.query(Place).filter(Place.id == place_id).first()

    @staticmethod
    def get_place_with_menu(db: Session, place_id: int) -> Optional[Place]:
        return (
            db.query(Place)
            .options(
                selectinload(Place.menu_items),
                selectinload(Place.bundles).selectinload(Bundle.bundle_items).joinedload(BundleItem.menu_item),
            )
            .filter(Place.id == place_id)
            .first()
        )

    @staticmethod
    def get_places_for_owner(db: Session, owner_id: int) -> list[Place]:
        return (
            db.query(Place)
            .filter(Place.owner_id == owner_id)
            .order_by(Place.created_at.desc(), Place.id.desc())
            .all()
        )

    @staticmethod
    def create_place(db: Session, owner_id: int, **place_data) -> Place:
        place = Place(owner_id=owner_id, **place_data)
        db.add(place)
        db.commit()
        db.refresh(place)
        return place

    @staticmethod
    def update_place(db: Session, place: Place, **updates) -> Place:
        """Apply updates verbatim; callers decide which keys are present"""
        for key, value in updates.items():
            if hasattr(place, key):
                setattr(place, key, value)
        db.commit()
        db.refresh(place)
        return place

    @staticmethod
    def create_menu_item(db: Session, place_id: int, name: str, price: float) -> MenuItem:
        item = MenuItem(place_id=place_id, name=name, price=price)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def get_menu_items(db: Session, place_id: int, item_ids: list[int]) -> list[MenuItem]:
        if not item_ids:
            return []
        return (
            db.query(MenuItem)
            .filter(MenuItem.place_id == place_id, MenuItem.id.in_(item_ids))
            .all()
        )

    @staticmethod
    def create_bundle(
        db: Session, place_id: int, name: str, price: float, menu_items: list[MenuItem]
    ) -> Bundle:
        bundle = Bundle(place_id=place_id, name=name, price=price)
        bundle.bundle_items = [BundleItem(menu_item=item, quantity=1) for item in menu_items]
        db.add(bundle)
        db.commit()
        db.refresh(bundle)
        return bundle

    @staticmethod
    def get_bookings_for_owner(db: Session, owner_id: int) -> list[Booking]:
        """Bookings on any of the owner's places, latest day first, earliest slot first"""
        return (
            db.query(Booking)
            .join(Place, Booking.place_id == Place.id)
            .options(joinedload(Booking.place), joinedload(Booking.user))
            .filter(Place.owner_id == owner_id)
            .order_by(Booking.date.desc(), Booking.start_time.asc(), Booking.id.desc())
            .all()
        )
