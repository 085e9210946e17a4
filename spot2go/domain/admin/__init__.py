"""Admin domain - Moderation of place submissions"""

from .router import router

__all__ = ["router"]
