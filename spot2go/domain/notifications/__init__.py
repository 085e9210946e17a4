"""Notifications domain - Push device tokens and fan-out"""

from .router import router

__all__ = ["router"]
