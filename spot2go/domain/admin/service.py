"""Admin service - Place moderation"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Place, PlaceStatus
from ...outbox import Outbox
from ...services.push_service import PushClient
from ..notifications.service import NotificationService
from .repository import AdminRepository
from .schemas import PlaceStats

logger = logging.getLogger(__name__)

MODERATION_STATUSES = {PlaceStatus.APPROVED.value, PlaceStatus.REJECTED.value}


class AdminService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    def get_place_stats(self) -> PlaceStats:
        """Rejected places count toward the total only"""
        counts = self.repo.count_places_by_status(self.db)
        return PlaceStats(
            total=sum(counts.values()),
            approved=counts.get(PlaceStatus.APPROVED.value, 0),
            pending=counts.get(PlaceStatus.PENDING.value, 0),
        )

    def get_pending_places(self) -> list[Place]:
        return self.repo.get_pending_places(self.db)

    def update_place_status(
        self, place_id: int, status: Optional[str], outbox: Outbox, push: PushClient
    ) -> Place:
        """Approve or reject a place and notify its owner.

        Any current status may move to either value; there is no transition guard.
        """
        if status not in MODERATION_STATUSES:
            raise HTTPException(
                status_code=400, detail="Invalid status. Must be 'approved' or 'rejected'."
            )

        place = self.repo.get_place(self.db, place_id)
        if not place:
            raise HTTPException(status_code=404, detail="Place not found")

        place = self.repo.set_status(self.db, place, status)
        logger.info(f"✅ Place {place.id} marked {status}")

        if status == PlaceStatus.APPROVED.value:
            title, body = "Place approved", f"{place.name} is now live on Spot2Go."
        else:
            title, body = "Place not approved", f"{place.name} was not approved. Review it and resubmit."
        NotificationService(self.db).send_to_user(
            place.owner_id, title, body, outbox, push, data={"placeId": str(place.id), "status": status}
        )
        return place
