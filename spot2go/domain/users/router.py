"""User router - Profile endpoints for any signed-in user"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...email_service import Mailer, get_mailer
from ...outbox import Outbox, get_outbox
from ...schemas import MessageResponse, TokenClaims
from .schemas import (
    PasswordChange,
    ProfileSummary,
    ProfileUpdate,
    ProfileUpdateResponse,
    SettingsResponse,
    SettingsUpdate,
    UserProfile,
)
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    current_user: TokenClaims = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserProfile.model_validate(service.get_user(current_user))


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    user = service.update_profile(data, current_user)
    return ProfileUpdateResponse(
        message="Profile updated successfully", user=ProfileSummary.model_validate(user)
    )


@router.put("/settings", response_model=SettingsResponse)
async def update_settings(
    data: SettingsUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    settings = service.update_settings(data.notifications, current_user)
    return SettingsResponse(message="Settings updated", settings=settings)


@router.put("/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    current_user: TokenClaims = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
    outbox: Outbox = Depends(get_outbox),
    mailer: Mailer = Depends(get_mailer),
):
    service.change_password(data, current_user, outbox, mailer)
    return MessageResponse(message="Password updated successfully")
