"""Bookings domain - Calendar export"""

from .router import router

__all__ = ["router"]
