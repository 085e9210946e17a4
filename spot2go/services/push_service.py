"""
Firebase Cloud Messaging client used for push fan-out to user devices
"""

import logging
from typing import Optional

import firebase_admin
from fastapi import Request
from firebase_admin import credentials, messaging

from ..config import FIREBASE_CREDENTIALS_PATH, FIREBASE_PROJECT_ID

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "spot2go"


class PushClient:
    def __init__(self, app: Optional[firebase_admin.App]):
        self.app = app

    @property
    def enabled(self) -> bool:
        return self.app is not None

    @classmethod
    def from_config(cls) -> "PushClient":
        """Initialize the Firebase Admin app once at startup"""
        try:
            return cls(firebase_admin.get_app(FIREBASE_APP_NAME))
        except ValueError:
            pass

        options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
        try:
            if FIREBASE_CREDENTIALS_PATH:
                cred = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
            else:
                cred = credentials.ApplicationDefault()
            app = firebase_admin.initialize_app(cred, options, name=FIREBASE_APP_NAME)
            logger.info("✅ Firebase Admin initialized for push notifications")
            return cls(app)
        except Exception as e:
            logger.warning(f"⚠️ Firebase Admin not initialized - push notifications disabled: {e}")
            return cls(None)

    def send_multicast(
        self, tokens: list[str], title: str, body: str, data: Optional[dict[str, str]] = None
    ) -> int:
        """Send one notification to every token. Returns the success count."""
        if not self.enabled:
            logger.debug("Push disabled, skipping multicast")
            return 0
        if not tokens:
            return 0

        message = messaging.MulticastMessage(
            tokens=tokens,
            notification=messaging.Notification(title=title, body=body),
            data={k: str(v) for k, v in (data or {}).items()},
        )
        response = messaging.send_each_for_multicast(message, app=self.app)
        logger.info(
            f"📱 Push multicast: {response.success_count} delivered, {response.failure_count} failed"
        )
        return response.success_count


def get_push_client(request: Request) -> PushClient:
    """Dependency injection for the push client built at startup"""
    return request.app.state.push
