"""Owner domain schemas - Pydantic models for validation"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...schemas import (
    BundleResponse,
    MenuItemResponse,
    PlaceResponse,
)

HH_MM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Location(BaseModel):
    """Where a place is: a display address plus map coordinates"""

    model_config = ConfigDict(extra="allow")

    address: Optional[str] = None
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)


class ReservableHours(BaseModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_hh_mm(cls, v):
        if not HH_MM.match(v):
            raise ValueError("Time must be in HH:MM format")
        return v

    @model_validator(mode="after")
    def validate_order(self):
        if self.start >= self.end:
            raise ValueError("Closing time must be after opening time")
        return self


class PlaceForm(BaseModel):
    """Raw multipart fields of a place submission before parsing"""

    name: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    amenities: Optional[list[str]] = None
    location: Optional[str] = None
    reservable: Optional[str] = None
    reservableHours: Optional[str] = None
    maxCapacity: Optional[str] = None


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)


class BundleCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    items: list[int] = Field(default_factory=list)


class OwnerPlaceDetail(PlaceResponse):
    menuItems: list[MenuItemResponse] = Field(default_factory=list, validation_alias="menu_items")
    bundles: list[BundleResponse] = Field(default_factory=list)


class PlaceMessageResponse(BaseModel):
    message: str
    place: PlaceResponse


class MenuItemMessageResponse(BaseModel):
    message: str
    item: MenuItemResponse


class BundleMessageResponse(BaseModel):
    message: str
    bundle: BundleResponse
