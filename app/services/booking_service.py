from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.core.config import settings
from app.core.exceptions import (
    NotFoundError, ServiceNotFoundError, ConflictError, SlotUnavailableError,
    InvalidInputError, InvalidTransitionError, StorageError
)
from app.schemas.appointment import BookingCreate, AppointmentStatus, TimeSlot
from app.schemas.salon import BusinessHours
from app.services.availability import (
    MINUTES_PER_DAY, find_conflicts, format_clock, list_slots, parse_clock
)
from app.services.block_service import get_salon_blocks
from app.services.catalog_service import get_service_by_id
from app.services.salon_service import get_salon_by_id
from datetime import date, datetime, timedelta
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError
import logging

logger = logging.getLogger(__name__)

def _with_id(appointment: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if appointment:
        appointment["id"] = str(appointment["_id"])
    return appointment

async def get_day_appointments(salon_id: str, date: str) -> List[Dict[str, Any]]:
    """
    Get the non-cancelled appointments of a salon on one date
    """
    cursor = db.db.appointments.find({
        "salonId": salon_id,
        "date": date,
        "status": {"$ne": AppointmentStatus.CANCELLED.value}
    }).sort("startTime", 1)
    return await cursor.to_list(length=None)

async def get_available_slots(
    salon: Dict[str, Any],
    day: date,
    duration: int,
    now: Optional[datetime] = None
) -> List[TimeSlot]:
    """
    Fetch the salon's appointments and blocks for the day and run the availability engine
    """
    date_str = day.isoformat()
    appointments = await get_day_appointments(salon["id"], date_str)
    blocks = await get_salon_blocks(salon["id"], date_str)

    business_hours = None
    if salon.get("businessHours"):
        business_hours = BusinessHours(**salon["businessHours"])

    return list_slots(
        day=day,
        duration=duration,
        business_hours=business_hours,
        appointments=appointments,
        blocks=blocks,
        buffer_minutes=salon.get("bookingBuffer", 0) or 0,
        now=now
    )

async def _ensure_interval_free(salon_id: str, date: str, start: int, end: int) -> None:
    conflicts = find_conflicts(start, end, await get_day_appointments(salon_id, date), date)
    if conflicts:
        logger.warning(
            f"Rejected {format_clock(start)}-{format_clock(end)} on {date} for salon {salon_id}: "
            f"overlaps appointment {conflicts[0]['_id']}"
        )
        raise SlotUnavailableError("This time slot is no longer available")

async def _insert_claims(salon_id: str, date: str, start: int, end: int, appointment_id: str) -> bool:
    """
    Reserve every minute of [start, end) for an appointment.

    The unique (salonId, date, minute) index turns a concurrent overlapping
    reservation into a duplicate key error; claims are inserted in ascending
    order so of two overlapping attempts exactly one gets the contested minute.
    Returns False when another appointment holds one of the minutes. Partial
    claims are removed whenever the insert does not complete.
    """
    claimed_at = datetime.utcnow()
    claims = [
        {
            "salonId": salon_id,
            "date": date,
            "minute": minute,
            "appointmentId": appointment_id,
            "createdAt": claimed_at,
        }
        for minute in range(start, end)
    ]
    inserted = False
    try:
        await db.db.slot_claims.insert_many(claims, ordered=True)
        inserted = True
    except (BulkWriteError, DuplicateKeyError):
        return False
    except PyMongoError:
        logger.exception(f"Failed to reserve slot on {date} for salon {salon_id}")
        raise StorageError("Failed to reserve time slot")
    finally:
        if not inserted:
            await _release_claims(appointment_id)
    return True

async def _reclaim_stale_claims(salon_id: str, date: str, start: int, end: int) -> bool:
    """
    Delete claims in [start, end) left behind by a booking that never wrote
    its appointment, or by a cancellation that never released them.

    A holder only counts as gone once its claims are older than
    STALE_CLAIM_SECONDS; a booking in flight has claims but no appointment yet.
    """
    cursor = db.db.slot_claims.find({
        "salonId": salon_id,
        "date": date,
        "minute": {"$gte": start, "$lt": end}
    })
    holders = {claim["appointmentId"] for claim in await cursor.to_list(length=None)}
    cutoff = datetime.utcnow() - timedelta(seconds=settings.STALE_CLAIM_SECONDS)

    reclaimed = False
    for holder in holders:
        try:
            holder_oid = ObjectId(holder)
        except (InvalidId, TypeError):
            holder_oid = None
        if holder_oid and await db.db.appointments.find_one({
            "_id": holder_oid,
            "status": {"$ne": AppointmentStatus.CANCELLED.value}
        }):
            continue

        result = await db.db.slot_claims.delete_many({
            "appointmentId": holder,
            "createdAt": {"$lt": cutoff}
        })
        if result.deleted_count:
            logger.warning(
                f"Removed {result.deleted_count} stale claims of {holder} on {date} for salon {salon_id}"
            )
            reclaimed = True

    return reclaimed

async def _claim_interval(salon_id: str, date: str, start: int, end: int, appointment_id: str) -> None:
    if await _insert_claims(salon_id, date, start, end, appointment_id):
        return
    # One retry once stale claims are out of the way
    if await _reclaim_stale_claims(salon_id, date, start, end) and \
            await _insert_claims(salon_id, date, start, end, appointment_id):
        return
    logger.warning(
        f"Lost race for {format_clock(start)}-{format_clock(end)} on {date} for salon {salon_id}"
    )
    raise SlotUnavailableError("This time slot is no longer available")

async def _release_claims(appointment_id: str) -> None:
    await db.db.slot_claims.delete_many({"appointmentId": appointment_id})

async def create_booking(booking_in: BookingCreate) -> Dict[str, Any]:
    """
    Book an appointment for a client.

    Raises:
        NotFoundError: The salon does not exist
        ServiceNotFoundError: The service is missing, inactive or not the salon's
        InvalidInputError: The service would run past midnight
        SlotUnavailableError: The interval overlaps a non-cancelled appointment
        StorageError: The appointment could not be written
    """
    salon = await get_salon_by_id(booking_in.salonId)
    if not salon:
        raise NotFoundError("Salon not found")

    service = await get_service_by_id(booking_in.serviceId)
    if not service or service["salonId"] != salon["id"] or not service.get("isActive", True):
        raise ServiceNotFoundError("Service not found")

    start = parse_clock(booking_in.startTime)
    end = start + service["duration"]
    if end > MINUTES_PER_DAY:
        raise InvalidInputError("Appointment must end on the day it starts")

    # Fast path: answer with a conflict without touching the claims
    await _ensure_interval_free(salon["id"], booking_in.date, start, end)

    if settings.RECHECK_BLOCKS_ON_BOOKING:
        blocks = await get_salon_blocks(salon["id"], booking_in.date)
        if find_conflicts(start, end, blocks, booking_in.date):
            raise SlotUnavailableError("This time slot is no longer available")

    appointment_oid = ObjectId()
    appointment_id = str(appointment_oid)

    appointment_data = booking_in.dict()
    appointment_data["_id"] = appointment_oid
    appointment_data["endTime"] = format_clock(end)
    appointment_data["status"] = AppointmentStatus.CONFIRMED.value
    appointment_data["createdAt"] = datetime.utcnow()

    await _claim_interval(salon["id"], booking_in.date, start, end, appointment_id)

    # Claims stay only once the appointment they belong to is stored
    booked = False
    try:
        await db.db.appointments.insert_one(appointment_data)
        booked = True
    except PyMongoError:
        logger.exception(f"Failed to create appointment for salon {salon['id']}")
        raise StorageError("Failed to create booking")
    finally:
        if not booked:
            await _release_claims(appointment_id)

    logger.info(
        f"Booked appointment {appointment_id} for salon {salon['id']} "
        f"on {booking_in.date} {booking_in.startTime}-{appointment_data['endTime']}"
    )
    return _with_id(appointment_data)

async def get_appointment_by_id(appointment_id: str, salon_id: str) -> Optional[Dict[str, Any]]:
    """
    Get an appointment, scoped to the salon that owns it
    """
    try:
        object_id = ObjectId(appointment_id)
    except (InvalidId, TypeError):
        return None
    appointment = await db.db.appointments.find_one({"_id": object_id, "salonId": salon_id})
    return _with_id(appointment)

async def get_salon_appointments(
    salon_id: str,
    date: Optional[str] = None,
    status: Optional[AppointmentStatus] = None
) -> List[Dict[str, Any]]:
    """
    Get appointments for a salon ordered by date and start time
    """
    query: Dict[str, Any] = {"salonId": salon_id}

    if date:
        query["date"] = date
    if status:
        query["status"] = status.value

    cursor = db.db.appointments.find(query).sort([("date", 1), ("startTime", 1)])
    appointments = await cursor.to_list(length=None)

    return [_with_id(appointment) for appointment in appointments]

async def set_appointment_status(
    appointment_id: str,
    salon_id: str,
    new_status: AppointmentStatus
) -> Dict[str, Any]:
    """
    Move an appointment along the status state machine.

    Cancelling frees the interval straight away; restoring a cancelled
    appointment reserves it again and fails if it was booked in between.
    """
    appointment = await get_appointment_by_id(appointment_id, salon_id)
    if not appointment:
        raise NotFoundError("Appointment not found")

    current_status = AppointmentStatus(appointment["status"])
    if not current_status.can_transition_to(new_status):
        raise InvalidTransitionError(
            f"Cannot change status from {current_status.value} to {new_status.value}"
        )

    restoring = current_status == AppointmentStatus.CANCELLED
    if restoring:
        start = parse_clock(appointment["startTime"])
        end = parse_clock(appointment["endTime"])
        await _ensure_interval_free(salon_id, appointment["date"], start, end)
        await _claim_interval(salon_id, appointment["date"], start, end, appointment["id"])

    # Only apply the change if nobody else moved the status since we read it
    updated = False
    try:
        result = await db.db.appointments.update_one(
            {"_id": appointment["_id"], "status": current_status.value},
            {"$set": {"status": new_status.value, "updatedAt": datetime.utcnow()}}
        )
        updated = result.modified_count > 0
    finally:
        if restoring and not updated:
            await _release_claims(appointment["id"])
    if not updated:
        raise ConflictError("Appointment was modified concurrently, reload and try again")

    if new_status == AppointmentStatus.CANCELLED:
        await _release_claims(appointment["id"])

    logger.info(
        f"Appointment {appointment['id']} of salon {salon_id}: "
        f"{current_status.value} -> {new_status.value}"
    )
    return await get_appointment_by_id(appointment_id, salon_id)
