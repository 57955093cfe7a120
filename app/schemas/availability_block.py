from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from app.schemas.salon import validate_hhmm, validate_iso_date

class AvailabilityBlockCreate(BaseModel):
    date: str  # Format: "2025-09-05"
    startTime: str  # Format: "14:00"
    endTime: str
    reason: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        return validate_iso_date(v)

    @field_validator("startTime", "endTime")
    @classmethod
    def check_time(cls, v: str) -> str:
        return validate_hhmm(v)

class AvailabilityBlockResponse(BaseModel):
    id: str
    salonId: str
    date: str
    startTime: str
    endTime: str
    reason: Optional[str] = None
    createdAt: datetime
