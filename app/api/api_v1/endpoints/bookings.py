from fastapi import APIRouter, status
from app.schemas.appointment import BookingCreate, AppointmentResponse
from app.services.booking_service import create_booking

router = APIRouter()

@router.post("/", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_new_booking(booking_in: BookingCreate):
    """
    Book an appointment from the public salon page.

    Answers 404 for an unknown salon or service and 409 when the slot was
    taken since the client listed it.
    """
    return await create_booking(booking_in)
