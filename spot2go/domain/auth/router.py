"""Auth router - FastAPI endpoints for registration, login, OAuth and password resets"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ...config import FRONTEND_URL
from ...database import get_db
from ...email_service import Mailer, get_mailer
from ...outbox import Outbox, get_outbox
from ...schemas import MessageResponse, TokenResponse
from ...security_utils import issue_token_for_user
from ...services import oauth_service
from .schemas import (
    LoginRequest,
    PasswordResetRequest,
    RegisterRequest,
    ResetPasswordRequest,
    ResetPasswordResponse,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


def _success_redirect(token: str) -> RedirectResponse:
    return RedirectResponse(url=f"{FRONTEND_URL}/success?{urlencode({'token': token})}", status_code=302)


def _failure_redirect(provider: str) -> RedirectResponse:
    return RedirectResponse(url=f"{FRONTEND_URL}/login?error={provider}_auth_failed", status_code=302)


# ============================================================================
# EMAIL / PASSWORD
# ============================================================================


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Create a customer or owner account"""
    return TokenResponse(token=service.register(data))


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return TokenResponse(token=service.login(data))


@router.post("/request-password-reset", response_model=MessageResponse)
async def request_password_reset(
    data: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service),
    outbox: Outbox = Depends(get_outbox),
    mailer: Mailer = Depends(get_mailer),
):
    """Email a reset link. The response is identical whether or not the account exists."""
    return MessageResponse(message=service.request_password_reset(data.email, outbox, mailer))


@router.post("/reset-password", response_model=ResetPasswordResponse)
async def reset_password(
    data: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
    outbox: Outbox = Depends(get_outbox),
    mailer: Mailer = Depends(get_mailer),
):
    token = service.reset_password(data.token, data.password, outbox, mailer)
    return ResetPasswordResponse(message="Password has been reset successfully.", token=token)


# ============================================================================
# GOOGLE
# ============================================================================


@router.get("/google")
async def google_login():
    return RedirectResponse(url=oauth_service.google_authorization_url(), status_code=302)


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange the code, sign the user in and hand the token to the frontend"""
    if error or not code:
        logger.warning(f"⚠️ Google callback without code (error={error})")
        return _failure_redirect("google")

    try:
        profile = await oauth_service.exchange_google_code(code)
        user = service.login_with_oauth(profile)
    except Exception as e:
        logger.error(f"❌ Google sign-in failed: {e}")
        return _failure_redirect("google")

    logger.info(f"✅ Google sign-in for user {user.id}")
    return _success_redirect(issue_token_for_user(user))


# ============================================================================
# APPLE
# ============================================================================


@router.get("/apple")
async def apple_login():
    return RedirectResponse(url=oauth_service.apple_authorization_url(), status_code=302)


@router.post("/apple/callback")
async def apple_callback(
    id_token: Optional[str] = Form(None),
    code: Optional[str] = Form(None),
    user: Optional[str] = Form(None),
    error: Optional[str] = Form(None),
    service: AuthService = Depends(get_auth_service),
):
    """Apple posts the identity token (and on first sign-in the user's name) as a form"""
    if error or not (id_token or code):
        logger.warning(f"⚠️ Apple callback without credentials (error={error})")
        return _failure_redirect("apple")

    try:
        if not id_token:
            id_token = await oauth_service.exchange_apple_code(code)
        claims = await oauth_service.verify_apple_id_token(id_token)
        profile = oauth_service.apple_profile(claims, oauth_service.parse_apple_user(user))
        account = service.login_with_oauth(profile)
    except Exception as e:
        logger.error(f"❌ Apple sign-in failed: {e}")
        return _failure_redirect("apple")

    logger.info(f"✅ Apple sign-in for user {account.id}")
    return _success_redirect(issue_token_for_user(account))
