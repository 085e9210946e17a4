"""Users domain - Profile and account settings"""

from .router import router

__all__ = ["router"]
