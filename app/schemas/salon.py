from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, date
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import re

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

def validate_hhmm(value: str) -> str:
    if not HHMM_PATTERN.match(value):
        raise ValueError(f"Time must be in 24-hour HH:MM format, got '{value}'")
    return value

def validate_iso_date(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValueError(f"Date must be in YYYY-MM-DD format, got '{value}'")
    return value

def validate_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone '{value}'")
    return value

class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        return list(cls)[day.weekday()]

class DayHours(BaseModel):
    isOpen: bool = False
    openTime: str = "09:00"
    closeTime: str = "17:00"

    @field_validator("openTime", "closeTime")
    @classmethod
    def check_time(cls, v: str) -> str:
        return validate_hhmm(v)

class BusinessHours(BaseModel):
    """One entry per weekday; a salon with no configured hours is closed every day."""
    monday: DayHours = Field(default_factory=DayHours)
    tuesday: DayHours = Field(default_factory=DayHours)
    wednesday: DayHours = Field(default_factory=DayHours)
    thursday: DayHours = Field(default_factory=DayHours)
    friday: DayHours = Field(default_factory=DayHours)
    saturday: DayHours = Field(default_factory=DayHours)
    sunday: DayHours = Field(default_factory=DayHours)

    def for_weekday(self, weekday: Weekday) -> DayHours:
        return getattr(self, weekday.value)

    def for_date(self, day: date) -> DayHours:
        return self.for_weekday(Weekday.from_date(day))

class SalonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str
    timezone: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    businessHours: BusinessHours = Field(default_factory=BusinessHours)
    bookingBuffer: int = Field(0, ge=0)

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        if not SLUG_PATTERN.match(v):
            raise ValueError("Slug may only contain lowercase letters, digits and single hyphens")
        # /salons/me is the owner's own salon
        if v == "me":
            raise ValueError("This slug is reserved")
        return v

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        return validate_timezone(v)

class SalonSettingsUpdate(BaseModel):
    businessHours: Optional[BusinessHours] = None
    bookingBuffer: Optional[int] = Field(None, ge=0)
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_timezone(v)

class SalonResponse(BaseModel):
    id: str
    ownerId: str
    name: str
    slug: str
    timezone: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    businessHours: BusinessHours
    bookingBuffer: int = 0
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class PublicService(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    duration: int
    price: float

class PublicSalonResponse(BaseModel):
    id: str
    name: str
    slug: str
    timezone: str
    description: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    businessHours: BusinessHours
    bookingBuffer: int = 0
    services: List[PublicService] = []
