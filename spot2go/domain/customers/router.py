"""Customer router - FastAPI endpoints for browsing places and booking them"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_role
from ...database import get_db
from ...email_service import Mailer, get_mailer
from ...models import Role
from ...outbox import Outbox, get_outbox
from ...schemas import BookingResponse, PlaceResponse, ReviewResponse, TokenClaims
from ...services.push_service import PushClient, get_push_client
from .schemas import (
    BookingCreate,
    BookingMessageResponse,
    BookmarkCreate,
    BookmarkResponse,
    CustomerPlaceDetail,
    ReviewCreate,
    ReviewMessageResponse,
    UserReviewResponse,
)
from .service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])

require_customer = require_role(Role.CUSTOMER)
require_any_role = require_role(Role.CUSTOMER, Role.OWNER, Role.ADMIN)


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


# ============================================================================
# PLACES
# ============================================================================


@router.get("/places", response_model=list[PlaceResponse])
async def list_places(
    current_user: TokenClaims = Depends(require_any_role),
    service: CustomerService = Depends(get_customer_service),
):
    """Approved places, newest first"""
    return [PlaceResponse.model_validate(p) for p in service.list_places()]


@router.get("/places/{place_id}", response_model=CustomerPlaceDetail)
async def get_place(
    place_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    """One approved place with menu, owner contact, reviews and open slots"""
    place, slots = service.get_place(place_id)
    detail = CustomerPlaceDetail.model_validate(place)
    detail.availableSlots = slots
    return detail


# ============================================================================
# BOOKINGS
# ============================================================================


@router.post("/bookings", response_model=BookingMessageResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
    outbox: Outbox = Depends(get_outbox),
    mailer: Mailer = Depends(get_mailer),
    push: PushClient = Depends(get_push_client),
):
    booking = service.create_booking(data, current_user, outbox, mailer, push)
    return BookingMessageResponse(
        message="Booking created successfully!", booking=BookingResponse.model_validate(booking)
    )


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings(
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    return [BookingResponse.model_validate(b) for b in service.list_bookings(current_user)]


@router.get("/bookings/ticket/{ticket_id}", response_model=BookingResponse)
async def get_booking_by_ticket(
    ticket_id: str,
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    return BookingResponse.model_validate(service.get_booking_by_ticket(ticket_id, current_user))


# ============================================================================
# BOOKMARKS
# ============================================================================


@router.get("/bookmarks", response_model=list[str])
async def list_bookmarks(
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    """Ids of bookmarked places, as strings"""
    return service.list_bookmark_ids(current_user)


@router.get("/bookmarks/places", response_model=list[PlaceResponse])
async def list_bookmarked_places(
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    return [PlaceResponse.model_validate(p) for p in service.list_bookmarked_places(current_user)]


@router.post("/bookmarks", response_model=BookmarkResponse, status_code=201)
async def add_bookmark(
    data: BookmarkCreate,
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    created, body = service.add_bookmark(data.placeId, current_user)
    if not created:
        return JSONResponse(status_code=200, content=body)
    return body


@router.delete("/bookmarks/{place_id}", response_model=BookmarkResponse)
async def remove_bookmark(
    place_id: int,
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    return service.remove_bookmark(place_id, current_user)


# ============================================================================
# REVIEWS
# ============================================================================


@router.post("/reviews", response_model=ReviewMessageResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    review = service.create_review(data, current_user)
    return ReviewMessageResponse(
        message="Review created successfully!", review=ReviewResponse.model_validate(review)
    )


@router.get("/reviews", response_model=list[UserReviewResponse])
async def list_reviews(
    current_user: TokenClaims = Depends(require_customer),
    service: CustomerService = Depends(get_customer_service),
):
    """The caller's reviews with the reviewed place, newest first"""
    return [UserReviewResponse.model_validate(r) for r in service.list_reviews(current_user)]
