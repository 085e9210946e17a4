"""Owner service - Place submissions, edits, menus and bookings for place owners"""

import logging
from typing import Any, Optional

from fastapi import HTTPException, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...models import Booking, Bundle, MenuItem, Place, PlaceStatus
from ...schemas import TokenClaims
from ...shared.validators import parse_form_bool, parse_json_field, split_amenities
from .repository import OwnerRepository
from .schemas import BundleCreate, Location, MenuItemCreate, PlaceForm, ReservableHours

logger = logging.getLogger(__name__)


def _parse_location(raw: Optional[str]) -> Optional[dict[str, Any]]:
    try:
        return Location.model_validate(parse_json_field(raw)).model_dump(exclude_none=True)
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning(f"⚠️ Rejected place location {raw!r}: {e}")
        raise HTTPException(status_code=400, detail="Invalid location format.") from e


def _parse_reservable_hours(raw: Optional[str]) -> dict[str, str]:
    try:
        return ReservableHours.model_validate(parse_json_field(raw)).model_dump()
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning(f"⚠️ Rejected reservable hours {raw!r}: {e}")
        raise HTTPException(status_code=400, detail="Invalid reservable hours format.") from e


def _parse_max_capacity(raw: Optional[str]) -> int:
    try:
        capacity = int(raw)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail="Invalid max capacity.") from e
    if capacity < 1:
        raise HTTPException(status_code=400, detail="Invalid max capacity.")
    return capacity


def present_files(files: Optional[list[UploadFile]]) -> list[UploadFile]:
    """Browsers send an empty part when no file was picked"""
    return [f for f in (files or []) if f is not None and f.filename]


class OwnerService:
    """Service layer for owner business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OwnerRepository()

    # ============================================================================
    # OWNERSHIP
    # ============================================================================

    def get_owned_place(self, place_id: int, user: TokenClaims, with_menu: bool = False) -> Place:
        """404 when the place does not exist, 403 when it belongs to another owner"""
        if with_menu:
            place = self.repo.get_place_with_menu(self.db, place_id)
        else:
            place = self.repo.get_place(self.db, place_id)
        if not place:
            raise HTTPException(status_code=404, detail="Place not found.")
        if place.owner_id != user.id:
            logger.warning(f"🚫 Owner {user.id} tried to access place {place_id} of owner {place.owner_id}")
            raise HTTPException(
                status_code=403, detail="You do not have permission to manage this place."
            )
        return place

    # ============================================================================
    # PLACES
    # ============================================================================

    def parse_new_place(self, form: PlaceForm, images: Optional[list[UploadFile]]) -> dict[str, Any]:
        """Validate a submission before any image is uploaded"""
        if not present_files(images):
            raise HTTPException(status_code=400, detail="At least one image is required.")
        if not form.name or not form.name.strip():
            raise HTTPException(status_code=400, detail="Place name is required.")

        reservable = parse_form_bool(form.reservable) or False
        fields = {
            "name": form.name.strip(),
            "type": form.type,
            "description": form.description,
            "amenities": split_amenities(form.amenities),
            "location": _parse_location(form.location) if form.location else None,
            "reservable": reservable,
            "reservable_hours": None,
            "max_capacity": 1,
        }
        if reservable:
            if form.reservableHours:
                fields["reservable_hours"] = _parse_reservable_hours(form.reservableHours)
            if form.maxCapacity:
                fields["max_capacity"] = _parse_max_capacity(form.maxCapacity)
        return fields

    def create_place(self, user: TokenClaims, fields: dict[str, Any], image_urls: list[str]) -> Place:
        place = self.repo.create_place(
            self.db,
            user.id,
            images=image_urls,
            status=PlaceStatus.PENDING.value,
            **fields,
        )
        logger.info(f"✅ Place {place.id} submitted for approval by owner {user.id}")
        return place

    def parse_place_updates(self, place: Place, form: PlaceForm) -> dict[str, Any]:
        """Only the fields present in the form change; everything else keeps its value"""
        updates: dict[str, Any] = {}
        if form.name is not None:
            if not form.name.strip():
                raise HTTPException(status_code=400, detail="Place name is required.")
            updates["name"] = form.name.strip()
        if form.type is not None:
            updates["type"] = form.type
        if form.description is not None:
            updates["description"] = form.description
        if form.amenities is not None:
            updates["amenities"] = split_amenities(form.amenities)
        if form.location:
            updates["location"] = _parse_location(form.location)

        reservable = place.reservable
        if form.reservable is not None:
            reservable = parse_form_bool(form.reservable)
            updates["reservable"] = reservable

        if not reservable:
            updates["reservable_hours"] = None
            updates["max_capacity"] = 1
        else:
            if form.reservableHours:
                updates["reservable_hours"] = _parse_reservable_hours(form.reservableHours)
            if form.maxCapacity:
                updates["max_capacity"] = _parse_max_capacity(form.maxCapacity)
        return updates

    def update_place(self, place: Place, updates: dict[str, Any]) -> Place:
        """Persist an edit. Every edit sends the place back to moderation."""
        updates["status"] = PlaceStatus.PENDING.value
        place = self.repo.update_place(self.db, place, **updates)
        logger.info(f"✅ Place {place.id} updated and re-submitted for approval")
        return place

    def get_places(self, user: TokenClaims) -> list[Place]:
        return self.repo.get_places_for_owner(self.db, user.id)

    # ============================================================================
    # MENU
    # ============================================================================

    def add_menu_item(self, place_id: int, data: MenuItemCreate, user: TokenClaims) -> MenuItem:
        place = self.get_owned_place(place_id, user)
        item = self.repo.create_menu_item(self.db, place.id, data.name, data.price)
        logger.info(f"✅ Menu item {item.id} added to place {place.id}")
        return item

    def add_bundle(self, place_id: int, data: BundleCreate, user: TokenClaims) -> Bundle:
        place = self.get_owned_place(place_id, user)

        item_ids = list(dict.fromkeys(data.items))
        menu_items = self.repo.get_menu_items(self.db, place.id, item_ids)
        if len(menu_items) != len(item_ids):
            raise HTTPException(
                status_code=400, detail="Bundle items must be menu items of this place."
            )

        bundle = self.repo.create_bundle(self.db, place.id, data.name, data.price, menu_items)
        logger.info(f"✅ Bundle {bundle.id} added to place {place.id} with {len(menu_items)} item(s)")
        return bundle

    # ============================================================================
    # BOOKINGS
    # ============================================================================

    def get_bookings(self, user: TokenClaims) -> list[Booking]:
        return self.repo.get_bookings_for_owner(self.db, user.id)
