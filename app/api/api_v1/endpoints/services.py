from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Dict, Any
from app.core.auth import get_current_salon
from app.schemas.service import ServiceCreate, ServiceUpdate, ServiceResponse
from app.services.catalog_service import (
    create_service, get_salon_services, update_service, delete_service
)

router = APIRouter()

@router.get("/me", response_model=List[ServiceResponse])
async def get_my_services(salon: dict = Depends(get_current_salon)):
    """
    Get all services offered by the current owner's salon
    """
    return await get_salon_services(salon["id"])

@router.post("/me", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def add_salon_service(
    service_in: ServiceCreate,
    salon: dict = Depends(get_current_salon)
):
    """
    Add a new service to the salon's offerings
    """
    return await create_service(salon["id"], service_in)

@router.put("/me/{service_id}", response_model=ServiceResponse)
async def update_salon_service(
    service_id: str,
    service_update: ServiceUpdate,
    salon: dict = Depends(get_current_salon)
):
    """
    Update an existing service
    """
    service = await update_service(salon["id"], service_id, service_update)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service

@router.delete("/me/{service_id}", response_model=Dict[str, Any])
async def delete_salon_service(
    service_id: str,
    salon: dict = Depends(get_current_salon)
):
    """
    Remove a service. Existing appointments keep their serviceId.
    """
    if not await delete_service(salon["id"], service_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return {"success": True}
