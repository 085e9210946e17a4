"""Notification router - Push device registration"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...schemas import TokenClaims
from .schemas import DeviceRegister, DeviceRegisterResponse
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.post("/devices", response_model=DeviceRegisterResponse)
async def save_device(
    data: DeviceRegister,
    current_user: TokenClaims = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    service.save_device(current_user.id, data.fcm_token)
    return DeviceRegisterResponse(ok=True)
