"""Device repository - Push token storage"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import UserDevice


class DeviceRepository:
    @staticmethod
    def get_by_token(db: Session, fcm_token: str) -> Optional[UserDevice]:
        return db.query(UserDevice).filter(UserDevice.fcm_token == fcm_token).first()

    @staticmethod
    def get_tokens_for_user(db: Session, user_id: int) -> list[str]:
        rows = db.query(UserDevice.fcm_token).filter(UserDevice.user_id == user_id).all()
        return [row[0] for row in rows if row[0]]

    @staticmethod
    def create_device(db: Session, user_id: int, fcm_token: str) -> UserDevice:
        device = UserDevice(user_id=user_id, fcm_token=fcm_token)
        db.add(device)
        db.commit()
        db.refresh(device)
        return device
