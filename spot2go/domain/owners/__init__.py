"""Owners domain - Place listings, menus and bookings for business owners"""

from .router import router

__all__ = ["router"]
