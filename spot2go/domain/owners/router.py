"""Owner router - FastAPI endpoints for place owners"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...auth import require_role
from ...database import get_db
from ...models import Role
from ...schemas import BookingResponse, BundleResponse, MenuItemResponse, PlaceResponse, TokenClaims
from ...storage import ImageStorage, get_storage, upload_place_images
from .schemas import (
    BundleCreate,
    BundleMessageResponse,
    MenuItemCreate,
    MenuItemMessageResponse,
    OwnerPlaceDetail,
    PlaceForm,
    PlaceMessageResponse,
)
from .service import OwnerService, present_files

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/owners", tags=["Owners"])

require_owner = require_role(Role.OWNER)


def get_owner_service(db: Session = Depends(get_db)) -> OwnerService:
    """Dependency injection for OwnerService"""
    return OwnerService(db)


def place_form(
    name: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    amenities: Optional[list[str]] = Form(None),
    location: Optional[str] = Form(None),
    reservable: Optional[str] = Form(None),
    reservableHours: Optional[str] = Form(None),
    maxCapacity: Optional[str] = Form(None),
) -> PlaceForm:
    return PlaceForm(
        name=name,
        type=type,
        description=description,
        amenities=amenities,
        location=location,
        reservable=reservable,
        reservableHours=reservableHours,
        maxCapacity=maxCapacity,
    )


# ============================================================================
# PLACES
# ============================================================================


@router.post("/places", response_model=PlaceMessageResponse, status_code=201)
async def create_place(
    form: PlaceForm = Depends(place_form),
    images: Optional[list[UploadFile]] = File(None),
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
    storage: ImageStorage = Depends(get_storage),
):
    """Submit a new place for approval (multipart, 1-5 JPEG/PNG images)"""
    fields = service.parse_new_place(form, images)
    image_urls = await upload_place_images(storage, present_files(images))
    place = service.create_place(current_user, fields, image_urls)
    return PlaceMessageResponse(
        message="Place submitted for approval!", place=PlaceResponse.model_validate(place)
    )


@router.put("/places/{place_id}", response_model=PlaceMessageResponse)
async def update_place(
    place_id: int,
    form: PlaceForm = Depends(place_form),
    images: Optional[list[UploadFile]] = File(None),
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
    storage: ImageStorage = Depends(get_storage),
):
    """Edit a place. New images replace the old set; the place goes back to pending."""
    place = service.get_owned_place(place_id, current_user)
    updates = service.parse_place_updates(place, form)
    new_images = present_files(images)
    if new_images:
        updates["images"] = await upload_place_images(storage, new_images)
    place = service.update_place(place, updates)
    return PlaceMessageResponse(
        message="Place updated and re-submitted for approval!",
        place=PlaceResponse.model_validate(place),
    )


@router.get("/places", response_model=list[PlaceResponse])
async def get_owner_places(
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
):
    return [PlaceResponse.model_validate(p) for p in service.get_places(current_user)]


@router.get("/places/{place_id}", response_model=OwnerPlaceDetail)
async def get_owner_place(
    place_id: int,
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
):
    """One of the owner's places with its menu items and bundles"""
    place = service.get_owned_place(place_id, current_user, with_menu=True)
    return OwnerPlaceDetail.model_validate(place)


# ============================================================================
# MENU
# ============================================================================


@router.post("/places/{place_id}/menu", response_model=MenuItemMessageResponse, status_code=201)
async def add_menu_item(
    place_id: int,
    data: MenuItemCreate,
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
):
    item = service.add_menu_item(place_id, data, current_user)
    return MenuItemMessageResponse(message="Item added", item=MenuItemResponse.model_validate(item))


@router.post("/places/{place_id}/bundles", response_model=BundleMessageResponse, status_code=201)
async def add_bundle(
    place_id: int,
    data: BundleCreate,
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
):
    bundle = service.add_bundle(place_id, data, current_user)
    return BundleMessageResponse(message="Bundle added", bundle=BundleResponse.model_validate(bundle))


# ============================================================================
# BOOKINGS
# ============================================================================


@router.get("/bookings", response_model=list[BookingResponse])
async def get_owner_bookings(
    current_user: TokenClaims = Depends(require_owner),
    service: OwnerService = Depends(get_owner_service),
):
    """Bookings on the owner's places with the booker's contact details"""
    return [BookingResponse.model_validate(b) for b in service.get_bookings(current_user)]
