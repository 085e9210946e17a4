from typing import Optional

from pydantic import BaseModel


class DeviceRegister(BaseModel):
    fcm_token: Optional[str] = None


class DeviceRegisterResponse(BaseModel):
    ok: bool
