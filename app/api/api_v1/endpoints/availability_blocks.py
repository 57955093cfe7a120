from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Dict, Any, Optional
from app.core.auth import get_current_salon
from app.schemas.availability_block import AvailabilityBlockCreate, AvailabilityBlockResponse
from app.services.block_service import create_block, get_salon_blocks, delete_block

router = APIRouter()

@router.get("/me", response_model=List[AvailabilityBlockResponse])
async def get_my_blocks(
    date: Optional[str] = Query(None, description="Only blocks on this date (YYYY-MM-DD format)"),
    salon: dict = Depends(get_current_salon)
):
    """
    Get the salon's blocked periods
    """
    return await get_salon_blocks(salon["id"], date)

@router.post("/me", response_model=AvailabilityBlockResponse, status_code=status.HTTP_201_CREATED)
async def add_block(
    block_in: AvailabilityBlockCreate,
    salon: dict = Depends(get_current_salon)
):
    """
    Block a period of a day (vacation, break, ...)
    """
    return await create_block(salon["id"], block_in)

@router.delete("/me/{block_id}", response_model=Dict[str, Any])
async def remove_block(
    block_id: str,
    salon: dict = Depends(get_current_salon)
):
    """
    Delete a blocked period
    """
    if not await delete_block(salon["id"], block_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Block not found"
        )
    return {"success": True}
