from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.service import ServiceCreate, ServiceUpdate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

def _with_id(service: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if service:
        service["id"] = str(service["_id"])
    return service

async def create_service(salon_id: str, service_in: ServiceCreate) -> Dict[str, Any]:
    service_data = service_in.dict()
    service_data["salonId"] = salon_id
    service_data["createdAt"] = datetime.utcnow()

    result = await db.db.services.insert_one(service_data)
    return _with_id(await db.db.services.find_one({"_id": result.inserted_id}))

async def get_service_by_id(service_id: str) -> Optional[Dict[str, Any]]:
    try:
        object_id = ObjectId(service_id)
    except (InvalidId, TypeError):
        return None
    return _with_id(await db.db.services.find_one({"_id": object_id}))

async def get_salon_services(salon_id: str, active_only: bool = False) -> List[Dict[str, Any]]:
    """
    Get a salon's services ordered for display
    """
    query: Dict[str, Any] = {"salonId": salon_id}
    if active_only:
        query["isActive"] = True

    cursor = db.db.services.find(query).sort([("displayOrder", 1), ("createdAt", 1)])
    services = await cursor.to_list(length=None)
    return [_with_id(service) for service in services]

async def update_service(salon_id: str, service_id: str, service_update: ServiceUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a service, scoped to the owning salon. Returns None if it does not exist.
    """
    service = await get_service_by_id(service_id)
    if not service or service["salonId"] != salon_id:
        return None

    update_data = service_update.dict(exclude_unset=True)
    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.services.update_one(
            {"_id": service["_id"]},
            {"$set": update_data}
        )

    return await get_service_by_id(service_id)

async def delete_service(salon_id: str, service_id: str) -> bool:
    try:
        object_id = ObjectId(service_id)
    except (InvalidId, TypeError):
        return False
    result = await db.db.services.delete_one({"_id": object_id, "salonId": salon_id})
    return result.deleted_count > 0
