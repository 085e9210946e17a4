"""
OAuth Service
Google and Sign in with Apple flows: authorization URLs, code exchange and
identity verification. Account lookup and linking live in the auth domain.
"""

import json
import logging
import time
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
from jose import JWTError
from jose import jwt as jose_jwt

from ..config import (
    APPLE_CALLBACK_URL,
    APPLE_CLIENT_ID,
    APPLE_KEY_ID,
    APPLE_PRIVATE_KEY,
    APPLE_TEAM_ID,
    GOOGLE_CALLBACK_URL,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
)

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

APPLE_ISSUER = "https://appleid.apple.com"
APPLE_AUTH_URL = "https://appleid.apple.com/auth/authorize"
APPLE_TOKEN_URL = "https://appleid.apple.com/auth/token"
APPLE_KEYS_URL = "https://appleid.apple.com/auth/keys"

HTTP_TIMEOUT = 10.0


class OAuthError(Exception):
    """Raised when a provider rejects the exchange or returns an unusable identity"""


class OAuthProfile:
    def __init__(self, provider: str, provider_id: str, email: Optional[str], name: str):
        self.provider = provider
        self.provider_id = provider_id
        self.email = email
        self.name = name

    def __repr__(self) -> str:
        return f"OAuthProfile(provider={self.provider!r}, provider_id={self.provider_id!r})"


# ============================================================================
# GOOGLE
# ============================================================================


def google_authorization_url(state: Optional[str] = None) -> str:
    params = {
        "client_id": GOOGLE_CLIENT_ID or "",
        "redirect_uri": GOOGLE_CALLBACK_URL,
        "response_type": "code",
        "scope": "openid email profile",
        "access_type": "online",
        "prompt": "select_account",
    }
    if state:
        params["state"] = state
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def google_profile_from_userinfo(userinfo: dict[str, Any]) -> OAuthProfile:
    google_id = userinfo.get("sub") or userinfo.get("id")
    if not google_id:
        raise OAuthError("No Google ID returned")
    email = userinfo.get("email")
    name = userinfo.get("name") or (email.split("@")[0] if email else f"User {str(google_id)[:5]}")
    return OAuthProfile("google", str(google_id), email, name)


async def exchange_google_code(code: str) -> OAuthProfile:
    """Trade an authorization code for the user's Google profile"""
    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
        raise OAuthError("Google OAuth is not configured")

    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        token_response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": GOOGLE_CLIENT_ID,
                "client_secret": GOOGLE_CLIENT_SECRET,
                "redirect_uri": GOOGLE_CALLBACK_URL,
                "grant_type": "authorization_code",
            },
        )
        if token_response.status_code != 200:
            logger.error(f"❌ Google token exchange failed: {token_response.text}")
            raise OAuthError("Google token exchange failed")

        access_token = token_response.json().get("access_token")
        if not access_token:
            raise OAuthError("No access token in Google response")

        userinfo_response = await client.get(
            GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
        )
        if userinfo_response.status_code != 200:
            logger.error(f"❌ Google userinfo request failed: {userinfo_response.text}")
            raise OAuthError("Google userinfo request failed")

    return google_profile_from_userinfo(userinfo_response.json())


# ============================================================================
# APPLE
# ============================================================================


def apple_authorization_url(state: Optional[str] = None) -> str:
    params = {
        "client_id": APPLE_CLIENT_ID or "",
        "redirect_uri": APPLE_CALLBACK_URL,
        "response_type": "code id_token",
        "response_mode": "form_post",
        "scope": "name email",
    }
    if state:
        params["state"] = state
    return f"{APPLE_AUTH_URL}?{urlencode(params)}"


def apple_client_secret(now: Optional[int] = None) -> str:
    """ES256 JWT Apple accepts in place of a static client secret"""
    if not (APPLE_CLIENT_ID and APPLE_TEAM_ID and APPLE_KEY_ID and APPLE_PRIVATE_KEY):
        raise OAuthError("Sign in with Apple is not configured")
    issued_at = now or int(time.time())
    claims = {
        "iss": APPLE_TEAM_ID,
        "iat": issued_at,
        "exp": issued_at + 300,
        "aud": APPLE_ISSUER,
        "sub": APPLE_CLIENT_ID,
    }
    return jose_jwt.encode(claims, APPLE_PRIVATE_KEY, algorithm="ES256", headers={"kid": APPLE_KEY_ID})


async def exchange_apple_code(code: str) -> str:
    """Trade an authorization code for Apple's identity token"""
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        response = await client.post(
            APPLE_TOKEN_URL,
            data={
                "client_id": APPLE_CLIENT_ID,
                "client_secret": apple_client_secret(),
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": APPLE_CALLBACK_URL,
            },
        )
    if response.status_code != 200:
        logger.error(f"❌ Apple token exchange failed: {response.text}")
        raise OAuthError("Apple token exchange failed")

    id_token = response.json().get("id_token")
    if not id_token:
        raise OAuthError("No id_token in Apple response")
    return id_token


async def fetch_apple_keys() -> list[dict[str, Any]]:
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        response = await client.get(APPLE_KEYS_URL)
    response.raise_for_status()
    return response.json().get("keys", [])


async def verify_apple_id_token(id_token: str) -> dict[str, Any]:
    """Verify the identity token signature against Apple's published keys"""
    try:
        header = jose_jwt.get_unverified_header(id_token)
    except JWTError as e:
        raise OAuthError("Malformed Apple identity token") from e

    keys = await fetch_apple_keys()
    key = next((k for k in keys if k.get("kid") == header.get("kid")), None)
    if key is None:
        raise OAuthError("Apple signing key not found")

    try:
        return jose_jwt.decode(
            id_token,
            key,
            algorithms=[key.get("alg", "RS256")],
            audience=APPLE_CLIENT_ID,
            issuer=APPLE_ISSUER,
        )
    except JWTError as e:
        logger.warning(f"⚠️ Apple identity token rejected: {e}")
        raise OAuthError("Invalid Apple identity token") from e


def parse_apple_user(raw_user: Optional[str]) -> dict[str, Any]:
    """Apple posts the user's name as JSON on the first sign-in only"""
    if not raw_user:
        return {}
    try:
        data = json.loads(raw_user)
    except ValueError:
        logger.warning("⚠️ Ignoring malformed Apple user payload")
        return {}
    return data if isinstance(data, dict) else {}


def apple_profile(claims: dict[str, Any], user_data: Optional[dict[str, Any]] = None) -> OAuthProfile:
    """Build the profile for an Apple sign-in.

    The display name is "first last" when Apple sent a name, otherwise the
    local part of the email, otherwise "User " plus the first five characters
    of the Apple id.
    """
    user_data = user_data or {}
    apple_id = claims.get("sub")
    if not apple_id:
        raise OAuthError("No Apple ID returned")

    email = user_data.get("email") or claims.get("email")
    name_fields = user_data.get("name")
    if not isinstance(name_fields, dict):
        name_fields = {}
    full_name = f"{name_fields.get('firstName') or ''} {name_fields.get('lastName') or ''}".strip()

    if full_name:
        name = full_name
    elif email:
        name = email.split("@")[0]
    else:
        name = f"User {apple_id[:5]}"

    return OAuthProfile("apple", apple_id, email, name)
