"""Auth domain - Local accounts, OAuth sign-in and password resets"""

from .router import router

__all__ = ["router"]
