from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from app.core.auth import get_current_salon
from app.schemas.appointment import AppointmentResponse, AppointmentStatus, AppointmentStatusUpdate
from app.services.booking_service import (
    get_appointment_by_id, get_salon_appointments, set_appointment_status
)

router = APIRouter()

@router.get("/me", response_model=List[AppointmentResponse])
async def get_my_appointments(
    date: Optional[str] = Query(None, description="Only appointments on this date (YYYY-MM-DD format)"),
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    salon: dict = Depends(get_current_salon)
):
    """
    Get the salon's appointments, cancelled ones included unless filtered out
    """
    return await get_salon_appointments(salon["id"], date=date, status=status_filter)

@router.get("/me/{appointment_id}", response_model=AppointmentResponse)
async def get_my_appointment(
    appointment_id: str,
    salon: dict = Depends(get_current_salon)
):
    """
    Get appointment details
    """
    appointment = await get_appointment_by_id(appointment_id, salon["id"])
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return appointment

@router.patch("/me/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    status_update: AppointmentStatusUpdate,
    salon: dict = Depends(get_current_salon)
):
    """
    Complete, mark as no-show, cancel or restore an appointment
    """
    return await set_appointment_status(appointment_id, salon["id"], status_update.status)
