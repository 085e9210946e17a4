"""Admin router - Place moderation endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_role
from ...database import get_db
from ...models import Role
from ...outbox import Outbox, get_outbox
from ...schemas import PlaceResponse, TokenClaims
from ...services.push_service import PushClient, get_push_client
from .schemas import PendingPlaceResponse, PlaceStats, PlaceStatusResponse, PlaceStatusUpdate
from .service import AdminService

router = APIRouter(prefix="/admin", tags=["Admin"])

require_admin = require_role(Role.ADMIN)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@router.get("/places/stats", response_model=PlaceStats)
async def get_place_stats(
    current_user: TokenClaims = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_place_stats()


@router.get("/places/pending", response_model=list[PendingPlaceResponse])
async def get_pending_places(
    current_user: TokenClaims = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Places awaiting moderation with owner contact and menu"""
    return [PendingPlaceResponse.model_validate(p) for p in service.get_pending_places()]


@router.put("/places/{place_id}/status", response_model=PlaceStatusResponse)
async def update_place_status(
    place_id: int,
    data: PlaceStatusUpdate,
    current_user: TokenClaims = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    outbox: Outbox = Depends(get_outbox),
    push: PushClient = Depends(get_push_client),
):
    place = service.update_place_status(place_id, data.status, outbox, push)
    return PlaceStatusResponse(
        message=f"Place {place.status} successfully", place=PlaceResponse.model_validate(place)
    )
