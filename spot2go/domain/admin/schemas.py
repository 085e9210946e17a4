from typing import Optional

from pydantic import BaseModel, Field

from ...schemas import MenuItemResponse, PlaceResponse, UserSummary


class PlaceStats(BaseModel):
    total: int
    approved: int
    pending: int


class PendingPlaceResponse(PlaceResponse):
    owner: Optional[UserSummary] = None
    menuItems: list[MenuItemResponse] = Field(default_factory=list, validation_alias="menu_items")


class PlaceStatusUpdate(BaseModel):
    status: Optional[str] = None


class PlaceStatusResponse(BaseModel):
    message: str
    place: PlaceResponse
