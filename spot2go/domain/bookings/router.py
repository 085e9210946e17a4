from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...schemas import TokenClaims
from .service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


@router.get("/{booking_id}/calendar")
async def download_calendar_file(
    booking_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Download the booking as an .ics calendar event"""
    filename, content = service.calendar_file(booking_id, current_user)
    return Response(
        content=content,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
