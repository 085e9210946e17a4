"""User repository - Database operations for accounts and credentials"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import AuthProvider, User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_local_by_email(db: Session, email: str) -> Optional[User]:
        """Password resets only apply to email/password accounts"""
        return (
            db.query(User)
            .filter(User.email == email, User.provider == AuthProvider.LOCAL.value)
            .first()
        )

    @staticmethod
    def get_by_provider(db: Session, provider: str, provider_id: str) -> Optional[User]:
        return (
            db.query(User)
            .filter(User.provider == provider, User.provider_id == provider_id)
            .first()
        )

    @staticmethod
    def get_by_reset_token_hash(db: Session, token_hash: str, now: datetime) -> Optional[User]:
        """Find the user holding an unexpired reset token"""
        return (
            db.query(User)
            .filter(
                User.password_reset_token == token_hash,
                User.password_reset_expires > now,
            )
            .first()
        )

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Apply updates verbatim (None clears a column)"""
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user
