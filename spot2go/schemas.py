import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Role


class TokenClaims(BaseModel):
    """Decoded login token payload attached to authenticated requests"""

    model_config = ConfigDict(extra="ignore")

    id: int
    email: Optional[str] = None
    role: str
    name: Optional[str] = None
    createdAt: Optional[str] = None

    @property
    def role_enum(self) -> Optional[Role]:
        try:
            return Role(self.role)
        except ValueError:
            return None


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    token: str


# ORM -> camelCase response models. Field names are the wire names; the
# validation alias is the model attribute they are read from.
class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class UserSummary(ORMModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class UserName(ORMModel):
    name: Optional[str] = None


class PlaceName(ORMModel):
    id: int
    name: str


class PlaceSummary(ORMModel):
    id: int
    name: str
    location: Optional[dict[str, Any]] = None
    images: Optional[list[str]] = None


class MenuItemResponse(ORMModel):
    id: int
    placeId: int = Field(validation_alias="place_id")
    name: str
    price: float
    available: bool = True


class BundleItemResponse(ORMModel):
    menuItemId: int = Field(validation_alias="menu_item_id")
    quantity: int
    menuItem: Optional[MenuItemResponse] = Field(default=None, validation_alias="menu_item")


class BundleResponse(ORMModel):
    id: int
    placeId: int = Field(validation_alias="place_id")
    name: str
    price: float
    items: list[BundleItemResponse] = Field(default_factory=list, validation_alias="bundle_items")


class PlaceResponse(ORMModel):
    id: int
    ownerId: int = Field(validation_alias="owner_id")
    name: str
    type: Optional[str] = None
    rating: float = 0.0
    reviewCount: int = Field(default=0, validation_alias="review_count")
    description: Optional[str] = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    location: Optional[dict[str, Any]] = None
    status: str
    reservable: bool = False
    reservableHours: Optional[dict[str, Any]] = Field(default=None, validation_alias="reservable_hours")
    maxCapacity: int = Field(default=1, validation_alias="max_capacity")
    createdAt: Optional[dt.datetime] = Field(default=None, validation_alias="created_at")
    updatedAt: Optional[dt.datetime] = Field(default=None, validation_alias="updated_at")


class ReviewResponse(ORMModel):
    id: int
    userId: int = Field(validation_alias="user_id")
    placeId: int = Field(validation_alias="place_id")
    rating: int
    comment: Optional[str] = None
    createdAt: Optional[dt.datetime] = Field(default=None, validation_alias="created_at")
    user: Optional[UserName] = None


class BookingResponse(ORMModel):
    id: int
    userId: int = Field(validation_alias="user_id")
    placeId: int = Field(validation_alias="place_id")
    status: str
    amount: Optional[float] = None
    paymentId: Optional[str] = Field(default=None, validation_alias="payment_id")
    date: Optional[dt.date] = None
    startTime: Optional[dt.time] = Field(default=None, validation_alias="start_time")
    endTime: Optional[dt.time] = Field(default=None, validation_alias="end_time")
    ticketId: str = Field(validation_alias="ticket_id")
    createdAt: Optional[dt.datetime] = Field(default=None, validation_alias="created_at")
    place: Optional[PlaceSummary] = None
    user: Optional[UserSummary] = None
