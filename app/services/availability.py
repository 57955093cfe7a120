"""
Availability engine.

Turns a salon's weekly business hours, its blocked periods and its
existing appointments into the list of bookable start times for one day.
Everything here is pure: the functions only look at their arguments, so
listing slots twice with the same inputs gives the same answer.

Times are naive wall-clock strings ("HH:MM", stored values may carry
seconds) and are compared as minutes since midnight.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from app.schemas.appointment import AppointmentStatus, TimeSlot
from app.schemas.salon import BusinessHours, DayHours

# Candidate start times always advance by a quarter hour, whatever the service duration
SLOT_STEP_MINUTES = 15
MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> int:
    """Convert "HH:MM" or "HH:MM:SS" to minutes since midnight."""
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time value: '{value}'")
    hours, minutes = int(parts[0]), int(parts[1])
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(start: int, end: int, other_start: int, other_end: int) -> bool:
    """Half-open interval overlap: [start, end) against [other_start, other_end)."""
    return start < other_end and end > other_start


def generate_slot_times(
    day_hours: Optional[DayHours],
    duration: int,
    step: int = SLOT_STEP_MINUTES
) -> List[int]:
    """
    Candidate start minutes for one day.

    A slot that ends exactly at closing time is still offered. A closed
    (or unconfigured) day yields no candidates.
    """
    if day_hours is None or not day_hours.isOpen:
        return []

    close = parse_clock(day_hours.closeTime)
    cursor = parse_clock(day_hours.openTime)
    candidates: List[int] = []

    while cursor + duration <= close:
        candidates.append(cursor)
        cursor += step

    return candidates


def find_conflicts(
    start: int,
    end: int,
    records: Iterable[Dict[str, Any]],
    date_str: str
) -> List[Dict[str, Any]]:
    """
    Records on date_str whose interval overlaps [start, end).

    Works for appointments and blocks alike; blocks carry no status so
    only cancelled appointments are ever skipped.
    """
    return [
        record for record in records
        if record.get("status") != AppointmentStatus.CANCELLED.value
        and record.get("date") == date_str
        and overlaps(start, end, parse_clock(record["startTime"]), parse_clock(record["endTime"]))
    ]


def is_slot_available(
    slot_start: int,
    duration: int,
    date_str: str,
    appointments: Iterable[Dict[str, Any]],
    blocks: Iterable[Dict[str, Any]],
    buffer_minutes: int = 0
) -> bool:
    """
    Check one candidate against appointments and blocks of the same date.

    The buffer only pads the candidate: it is cleanup time after the new
    appointment, existing appointments are taken as booked.
    """
    slot_end = slot_start + duration + buffer_minutes

    if find_conflicts(slot_start, slot_end, appointments, date_str):
        return False
    if find_conflicts(slot_start, slot_end, blocks, date_str):
        return False
    return True


def list_slots(
    day: date,
    duration: int,
    business_hours: Optional[BusinessHours],
    appointments: Iterable[Dict[str, Any]],
    blocks: Iterable[Dict[str, Any]],
    buffer_minutes: int = 0,
    now: Optional[datetime] = None
) -> List[TimeSlot]:
    """
    Compute the time slots shown to a client for one day.

    Args:
        day: The calendar date being booked
        duration: Service duration in minutes
        business_hours: The salon's weekly hours (None means never open)
        appointments: Appointment documents, any date or status
        blocks: Availability block documents, any date
        buffer_minutes: Extra minutes reserved after each candidate
        now: Wall-clock time in the salon's timezone; slots not after it
            are reported unavailable. Omit to skip the check.

    Returns:
        Ascending list of TimeSlot entries
    """
    day_hours = business_hours.for_date(day) if business_hours else None
    date_str = day.isoformat()

    # Materialise once, callers may hand in cursors or generators
    appointments = list(appointments)
    blocks = list(blocks)

    past_cutoff = None
    if now is not None:
        if now.date() > day:
            past_cutoff = MINUTES_PER_DAY
        elif now.date() == day:
            past_cutoff = now.hour * 60 + now.minute

    slots: List[TimeSlot] = []
    for start in generate_slot_times(day_hours, duration):
        available = is_slot_available(
            start, duration, date_str, appointments, blocks, buffer_minutes
        )
        if past_cutoff is not None and start <= past_cutoff:
            available = False
        slots.append(TimeSlot(time=format_clock(start), available=available))

    return slots
