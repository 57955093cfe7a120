from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, FrozenSet
from datetime import datetime
from enum import Enum
from app.schemas.salon import validate_hhmm, validate_iso_date

class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"

    def can_transition_to(self, target: "AppointmentStatus") -> bool:
        return target in ALLOWED_STATUS_TRANSITIONS[self]

# completed and no-show are terminal
ALLOWED_STATUS_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.CANCELLED: frozenset({AppointmentStatus.CONFIRMED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}

class BookingCreate(BaseModel):
    salonId: str
    serviceId: str
    date: str  # YYYY-MM-DD
    startTime: str  # HH:MM
    clientName: str = Field(..., min_length=1)
    clientEmail: str = Field(..., min_length=3)
    clientPhone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        return validate_iso_date(v)

    @field_validator("startTime")
    @classmethod
    def check_start_time(cls, v: str) -> str:
        return validate_hhmm(v)

    @field_validator("clientEmail")
    @classmethod
    def check_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("clientEmail must be an email address")
        return v.strip().lower()

class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus

class AppointmentResponse(BaseModel):
    id: str
    salonId: str
    serviceId: str
    date: str
    startTime: str
    endTime: str
    clientName: str
    clientEmail: str
    clientPhone: Optional[str] = None
    notes: Optional[str] = None
    status: AppointmentStatus
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class TimeSlot(BaseModel):
    time: str
    available: bool

class AvailabilityResponse(BaseModel):
    salonId: str
    date: str
    duration: int
    slots: List[TimeSlot]
