from typing import Dict, Any, Optional
from app.db.mongodb import db
from app.schemas.salon import SalonCreate, SalonSettingsUpdate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

def _with_id(salon: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if salon:
        salon["id"] = str(salon["_id"])
    return salon

async def create_salon(salon_in: SalonCreate, owner_id: str) -> Dict[str, Any]:
    """
    Create a salon for an owner. Callers check slug and owner uniqueness first;
    the unique indexes catch the remaining races.
    """
    salon_data = salon_in.dict()
    salon_data["ownerId"] = owner_id
    salon_data["createdAt"] = datetime.utcnow()

    result = await db.db.salons.insert_one(salon_data)

    created_salon = await db.db.salons.find_one({"_id": result.inserted_id})
    return _with_id(created_salon)

async def get_salon_by_id(salon_id: str) -> Optional[Dict[str, Any]]:
    try:
        object_id = ObjectId(salon_id)
    except (InvalidId, TypeError):
        return None
    return _with_id(await db.db.salons.find_one({"_id": object_id}))

async def get_salon_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    return _with_id(await db.db.salons.find_one({"slug": slug}))

async def get_salon_by_owner(owner_id: str) -> Optional[Dict[str, Any]]:
    return _with_id(await db.db.salons.find_one({"ownerId": owner_id}))

async def update_salon_settings(salon_id: str, settings_update: SalonSettingsUpdate) -> Optional[Dict[str, Any]]:
    """
    Update business hours, booking buffer and/or timezone.
    Business hours are replaced as a whole week; days left out are closed.
    """
    update_data = settings_update.dict(exclude={"businessHours"}, exclude_none=True)
    if settings_update.businessHours is not None:
        update_data["businessHours"] = settings_update.businessHours.dict()

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.salons.update_one(
            {"_id": ObjectId(salon_id)},
            {"$set": update_data}
        )

    return await get_salon_by_id(salon_id)
