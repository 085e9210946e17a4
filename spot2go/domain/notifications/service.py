"""Notification service - Device registration and push fan-out"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...outbox import Outbox
from ...services.push_service import PushClient
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DeviceRepository()

    def save_device(self, user_id: int, fcm_token: Optional[str]) -> None:
        """Register a push token for the user.

        A token that is already stored is left untouched, whichever user
        registered it first.
        """
        if not fcm_token:
            raise HTTPException(status_code=400, detail="Missing token")

        if self.repo.get_by_token(self.db, fcm_token) is not None:
            logger.debug(f"Device token already registered, ignoring registration from user {user_id}")
            return

        try:
            self.repo.create_device(self.db, user_id, fcm_token)
        except IntegrityError:
            # Same token inserted by a concurrent request
            self.db.rollback()
            return
        logger.info(f"📱 Registered device for user {user_id}")

    def send_to_user(
        self,
        user_id: int,
        title: str,
        body: str,
        outbox: Outbox,
        push: PushClient,
        data: Optional[dict[str, str]] = None,
    ) -> None:
        """Queue one multicast to every device the user registered.

        Tokens are read now, while the request session is open; delivery happens
        after the response. Failures are logged and never raised.
        """
        try:
            tokens = self.repo.get_tokens_for_user(self.db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ Could not load device tokens for user {user_id}: {e}")
            return

        if not tokens:
            logger.debug(f"No devices registered for user {user_id}, skipping push")
            return

        outbox.enqueue(f"push_user_{user_id}", push.send_multicast, tokens, title, body, data)
