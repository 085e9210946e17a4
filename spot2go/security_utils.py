"""
Security Utilities
Password hashing, reset tokens and JWT issuance shared by the auth flows
"""

import hashlib
import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import JWT_ALGORITHM, JWT_EXPIRES_HOURS, JWT_SECRET

logger = logging.getLogger(__name__)

# Password hashing context (bcrypt, cost factor 10)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

PASSWORD_RESET_TOKEN_BYTES = 32
PASSWORD_RESET_TTL = timedelta(hours=1)


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


def check_new_password(password: str) -> list[str]:
    """Return the list of rule violations for a new password (empty when valid)"""
    problems = []
    if len(password) < 8:
        problems.append("New password must be at least 8 characters")
    if not re.search(r"\d", password):
        problems.append("Password must contain a number")
    if not re.search(r"[A-Z]", password):
        problems.append("Password must contain an uppercase letter")
    if password == "password":
        problems.append('Password cannot be "password"')
    return problems


# ============================================================================
# PASSWORD RESET TOKENS
# ============================================================================


def generate_reset_token() -> str:
    """Generate the raw reset token that is emailed to the user"""
    return secrets.token_hex(PASSWORD_RESET_TOKEN_BYTES)


def hash_token_sha256(token: str) -> str:
    """SHA-256 hex digest; only this value is persisted"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def reset_token_expiry(now: Optional[datetime] = None) -> datetime:
    return (now or datetime.utcnow()) + PASSWORD_RESET_TTL


# ============================================================================
# JWT
# ============================================================================


def create_access_token(claims: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign a login token carrying the given claims"""
    to_encode = dict(claims)
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=JWT_EXPIRES_HOURS))
    to_encode["exp"] = expire
    to_encode["iat"] = datetime.utcnow()
    return jose_jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """Verify signature and expiry; returns None on any failure"""
    try:
        return jose_jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None


def token_claims_for_user(user) -> dict[str, Any]:
    """Claims embedded in every login token"""
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "name": user.name,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


def issue_token_for_user(user) -> str:
    return create_access_token(token_claims_for_user(user))
