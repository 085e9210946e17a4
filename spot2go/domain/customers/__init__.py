"""Customers domain - Place discovery, bookings, bookmarks and reviews"""

from .router import router

__all__ = ["router"]
