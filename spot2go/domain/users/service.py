"""User service - Profile, preferences and password changes for the signed-in user"""

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import Mailer
from ...models import AuthProvider, User
from ...outbox import Outbox
from ...schemas import TokenClaims
from ...security_utils import check_new_password, hash_password_bcrypt, verify_password_bcrypt
from ...shared.validators import normalize_phone
from ...utils.sanitization import sanitize_string
from ..auth.repository import UserRepository
from .schemas import NotificationSettings, PasswordChange, ProfileUpdate

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def get_user(self, current_user: TokenClaims) -> User:
        user = self.repo.get_by_id(self.db, current_user.id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def update_profile(self, data: ProfileUpdate, current_user: TokenClaims) -> User:
        name = (data.name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise HTTPException(
                status_code=400, detail=f"Name must be at most {MAX_NAME_LENGTH} characters"
            )

        updates = {"name": sanitize_string(name)}
        # Omitted phone keeps the stored one; an empty string clears it
        if data.phone is not None:
            try:
                updates["phone"] = normalize_phone(data.phone)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e)) from e

        user = self.get_user(current_user)
        user = self.repo.update_user(self.db, user, **updates)
        logger.info(f"✅ Profile updated for user {user.id}")
        return user

    def update_settings(self, notifications: NotificationSettings, current_user: TokenClaims) -> dict[str, Any]:
        if notifications is None:
            raise HTTPException(status_code=400, detail="notifications settings are required")

        user = self.get_user(current_user)
        settings = dict(user.settings or {})
        settings["notifications"] = {
            **settings.get("notifications", {}),
            **notifications.model_dump(exclude_none=True),
        }
        self.repo.update_user(self.db, user, settings=settings)
        logger.info(f"✅ Notification settings updated for user {user.id}")
        return settings

    def change_password(
        self, data: PasswordChange, current_user: TokenClaims, outbox: Outbox, mailer: Mailer
    ) -> None:
        if not data.currentPassword or not data.newPassword or not data.confirmPassword:
            raise HTTPException(status_code=400, detail="All password fields are required")

        user = self.get_user(current_user)
        if user.provider != AuthProvider.LOCAL.value or not user.password:
            raise HTTPException(
                status_code=400,
                detail="Password change is only available for email and password accounts",
            )

        if not verify_password_bcrypt(data.currentPassword, user.password):
            logger.warning(f"🚫 Wrong current password for user {user.id}")
            raise HTTPException(status_code=401, detail="Current password is incorrect")

        problems = check_new_password(data.newPassword)
        if problems:
            raise HTTPException(status_code=400, detail=problems[0])
        if data.newPassword != data.confirmPassword:
            raise HTTPException(status_code=400, detail="New passwords do not match")

        self.repo.update_user(self.db, user, password=hash_password_bcrypt(data.newPassword))
        logger.info(f"✅ Password changed for user {user.id}")

        if user.email:
            outbox.enqueue(
                "password_changed_email", mailer.send_password_changed_email, user.email, user.name
            )
