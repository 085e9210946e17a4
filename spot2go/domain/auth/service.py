"""Auth service - Registration, login, OAuth account linking and password resets"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...email_service import Mailer
from ...models import AuthProvider, Role, User
from ...outbox import Outbox
from ...security_utils import (
    check_new_password,
    generate_reset_token,
    hash_password_bcrypt,
    hash_token_sha256,
    issue_token_for_user,
    reset_token_expiry,
    verify_password_bcrypt,
)
from ...services.oauth_service import OAuthProfile
from .repository import UserRepository
from .schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

PUBLIC_SIGNUP_ROLES = {Role.CUSTOMER.value, Role.OWNER.value}
PASSWORD_RESET_SENT_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)


class AuthService:
    """Service layer for authentication business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: RegisterRequest) -> str:
        """Create a local account and return a login token"""
        if not data.name or not data.email or not data.password:
            raise HTTPException(
                status_code=400, detail="Name, email, and password are required fields."
            )

        role = data.role or Role.CUSTOMER.value
        if role not in PUBLIC_SIGNUP_ROLES:
            logger.warning(f"🚫 Registration attempted with role '{role}'")
            raise HTTPException(status_code=400, detail="Invalid role.")

        try:
            user = self.repo.create_user(
                self.db,
                name=data.name,
                email=data.email,
                password=hash_password_bcrypt(data.password),
                role=role,
                provider=AuthProvider.LOCAL.value,
            )
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"⚠️ Registration rejected, email already in use: {data.email}")
            raise HTTPException(
                status_code=409, detail="An account with this email already exists."
            ) from e

        logger.info(f"✅ Registered user {user.id} as {role}")
        return issue_token_for_user(user)

    def login(self, data: LoginRequest) -> str:
        if not data.email or not data.password:
            raise HTTPException(status_code=400, detail="Email and password are required.")

        user = self.repo.get_by_email(self.db, data.email)
        if not user:
            raise HTTPException(status_code=401, detail="User not found")

        if not user.password:
            raise HTTPException(status_code=401, detail="Please log in with your social account.")

        if not verify_password_bcrypt(data.password, user.password):
            logger.warning(f"🚫 Failed login for user {user.id}")
            raise HTTPException(status_code=401, detail="Invalid password")

        logger.info(f"✅ User {user.id} logged in")
        return issue_token_for_user(user)

    def login_with_oauth(self, profile: OAuthProfile) -> User:
        """Resolve a provider identity to a user.

        Lookup order: existing (provider, provider_id) link, then an account
        with the same email which gets linked, then a brand new customer.
        Linking keeps any local password on the account.
        """
        user = self.repo.get_by_provider(self.db, profile.provider, profile.provider_id)
        if user:
            return user

        if profile.email:
            user = self.repo.get_by_email(self.db, profile.email)
            if user:
                logger.info(f"🔗 Linking user {user.id} to {profile.provider}")
                return self.repo.update_user(
                    self.db, user, provider=profile.provider, provider_id=profile.provider_id
                )

        user = self.repo.create_user(
            self.db,
            name=profile.name,
            email=profile.email,
            role=Role.CUSTOMER.value,
            provider=profile.provider,
            provider_id=profile.provider_id,
        )
        logger.info(f"✅ Created {profile.provider} user {user.id}")
        return user

    def request_password_reset(self, email: Optional[str], outbox: Outbox, mailer: Mailer) -> str:
        """Always returns the same message so the endpoint does not reveal accounts"""
        user = self.repo.get_local_by_email(self.db, email) if email else None
        if not user:
            return PASSWORD_RESET_SENT_MESSAGE

        token = generate_reset_token()
        self.repo.update_user(
            self.db,
            user,
            password_reset_token=hash_token_sha256(token),
            password_reset_expires=reset_token_expiry(),
        )
        outbox.enqueue(
            "password_reset_email", mailer.send_password_reset_email, user.email, user.name, token
        )
        logger.info(f"📧 Password reset requested for user {user.id}")
        return PASSWORD_RESET_SENT_MESSAGE

    def reset_password(
        self, token: Optional[str], password: Optional[str], outbox: Outbox, mailer: Mailer
    ) -> str:
        """Consume a reset token, set the new password and return a fresh login token"""
        if not token or not password:
            raise HTTPException(status_code=400, detail="Token and new password are required.")

        user = self.repo.get_by_reset_token_hash(self.db, hash_token_sha256(token), datetime.utcnow())
        if not user:
            raise HTTPException(
                status_code=400, detail="Password reset token is invalid or has expired."
            )

        problems = check_new_password(password)
        if problems:
            raise HTTPException(status_code=400, detail=problems[0])

        self.repo.update_user(
            self.db,
            user,
            password=hash_password_bcrypt(password),
            password_reset_token=None,
            password_reset_expires=None,
        )
        logger.info(f"✅ Password reset for user {user.id}")

        if user.email:
            outbox.enqueue(
                "password_changed_email", mailer.send_password_changed_email, user.email, user.name
            )
        return issue_token_for_user(user)
