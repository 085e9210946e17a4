"""Customer domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from ...schemas import (
    BookingResponse,
    MenuItemResponse,
    ORMModel,
    PlaceName,
    PlaceResponse,
    ReviewResponse,
)


class BookingCreate(BaseModel):
    placeId: int
    amount: Optional[float] = None
    date: Optional[dt.date] = None
    startTime: Optional[dt.time] = None
    endTime: Optional[dt.time] = None


class BookmarkCreate(BaseModel):
    placeId: Optional[int] = None


class ReviewCreate(BaseModel):
    placeId: Optional[int] = None
    rating: Optional[int] = None
    comment: Optional[str] = Field(default=None, max_length=2000)


class OwnerContact(ORMModel):
    name: Optional[str] = None
    email: Optional[str] = None


class AvailableSlot(BaseModel):
    id: str
    date: str
    startTime: str
    endTime: str
    available: bool


class CustomerPlaceDetail(PlaceResponse):
    menuItems: list[MenuItemResponse] = Field(default_factory=list, validation_alias="menu_items")
    owner: Optional[OwnerContact] = None
    reviews: list[ReviewResponse] = Field(default_factory=list)
    availableSlots: Optional[list[AvailableSlot]] = None


class BookingMessageResponse(BaseModel):
    message: str
    booking: BookingResponse


class BookmarkResponse(BaseModel):
    message: str
    placeId: int


class UserReviewResponse(ReviewResponse):
    place: Optional[PlaceName] = None


class ReviewMessageResponse(BaseModel):
    message: str
    review: ReviewResponse
