"""User domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...schemas import ORMModel


class UserProfile(ORMModel):
    """Account details safe to return to their owner"""

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    provider: str
    settings: Optional[dict[str, Any]] = None
    createdAt: Optional[dt.datetime] = Field(default=None, validation_alias="created_at")
    updatedAt: Optional[dt.datetime] = Field(default=None, validation_alias="updated_at")


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class ProfileSummary(ORMModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str


class ProfileUpdateResponse(BaseModel):
    message: str
    user: ProfileSummary


class NotificationSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[bool] = None
    push: Optional[bool] = None
    marketing: Optional[bool] = None


class SettingsUpdate(BaseModel):
    notifications: Optional[NotificationSettings] = None


class SettingsResponse(BaseModel):
    message: str
    settings: dict[str, Any]


class PasswordChange(BaseModel):
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None
    confirmPassword: Optional[str] = None
