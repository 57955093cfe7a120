from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.availability_block import AvailabilityBlockCreate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

# Blocks may overlap each other; only bookings are kept disjoint

def _with_id(block: Dict[str, Any]) -> Dict[str, Any]:
    block["id"] = str(block["_id"])
    return block

async def create_block(salon_id: str, block_in: AvailabilityBlockCreate) -> Dict[str, Any]:
    block_data = block_in.dict()
    block_data["salonId"] = salon_id
    block_data["createdAt"] = datetime.utcnow()

    result = await db.db.availability_blocks.insert_one(block_data)
    return _with_id(await db.db.availability_blocks.find_one({"_id": result.inserted_id}))

async def get_salon_blocks(salon_id: str, date: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Get a salon's blocks, optionally for a single date, ordered by date and start
    """
    query: Dict[str, Any] = {"salonId": salon_id}
    if date:
        query["date"] = date

    cursor = db.db.availability_blocks.find(query).sort([("date", 1), ("startTime", 1)])
    blocks = await cursor.to_list(length=None)
    return [_with_id(block) for block in blocks]

async def delete_block(salon_id: str, block_id: str) -> bool:
    try:
        object_id = ObjectId(block_id)
    except (InvalidId, TypeError):
        return False
    result = await db.db.availability_blocks.delete_one({"_id": object_id, "salonId": salon_id})
    return result.deleted_count > 0
