from fastapi import APIRouter, HTTPException, Query, status
from typing import Optional
from app.core.config import settings
from app.schemas.appointment import AvailabilityResponse
from app.services.booking_service import get_available_slots
from app.services.catalog_service import get_service_by_id
from app.services.salon_service import get_salon_by_id
from datetime import datetime
from zoneinfo import ZoneInfo

router = APIRouter()

@router.get("/", response_model=AvailabilityResponse)
async def get_salon_availability(
    salonId: str = Query(..., description="Salon to list slots for"),
    date: str = Query(..., description="Date to list slots for (YYYY-MM-DD format)"),
    serviceId: Optional[str] = Query(None, description="Service whose duration is used"),
    serviceDuration: Optional[int] = Query(None, gt=0, description="Duration in minutes when no serviceId is given")
):
    """
    List bookable time slots for a salon on a date
    """
    # Validate date format
    try:
        day = datetime.strptime(date, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid date format. Use YYYY-MM-DD"
        )

    salon = await get_salon_by_id(salonId)
    if not salon:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salon not found"
        )

    if serviceId:
        service = await get_service_by_id(serviceId)
        if not service or service["salonId"] != salon["id"]:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Service not found"
            )
        duration = service["duration"]
    else:
        duration = serviceDuration or settings.DEFAULT_SERVICE_DURATION

    now = None
    if settings.HIDE_PAST_SLOTS:
        # Wall-clock time at the salon, compared against naive slot times
        tz = ZoneInfo(salon.get("timezone") or settings.DEFAULT_TIMEZONE)
        now = datetime.now(tz).replace(tzinfo=None)

    slots = await get_available_slots(salon, day, duration, now=now)
    return {"salonId": salon["id"], "date": date, "duration": duration, "slots": slots}
