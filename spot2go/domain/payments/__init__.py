"""Payments domain - Mocked payment intents and webhook"""

from .router import router

__all__ = ["router"]
