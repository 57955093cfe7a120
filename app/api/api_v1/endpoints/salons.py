from fastapi import APIRouter, Depends, HTTPException, status
from typing import Dict, Any
from pymongo.errors import DuplicateKeyError
from app.core.auth import get_current_owner, get_current_salon
from app.schemas.salon import SalonCreate, SalonSettingsUpdate, SalonResponse, PublicSalonResponse
from app.services.salon_service import (
    create_salon, get_salon_by_slug, get_salon_by_owner, update_salon_settings
)
from app.services.catalog_service import get_salon_services

router = APIRouter()

@router.post("/", response_model=SalonResponse, status_code=status.HTTP_201_CREATED)
async def create_new_salon(
    salon_in: SalonCreate,
    current_owner: dict = Depends(get_current_owner)
):
    """
    Create the current owner's salon
    """
    if await get_salon_by_owner(current_owner["_id"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You already have a salon"
        )

    if await get_salon_by_slug(salon_in.slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This slug is already taken. Please choose another."
        )

    try:
        return await create_salon(salon_in, current_owner["_id"])
    except DuplicateKeyError:
        # Lost a race against another create with the same slug or owner
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This slug is already taken. Please choose another."
        )

@router.get("/me", response_model=SalonResponse)
async def get_my_salon(salon: dict = Depends(get_current_salon)):
    """
    Get the current owner's salon
    """
    return salon

@router.put("/me/settings", response_model=SalonResponse)
async def update_my_salon_settings(
    settings_update: SalonSettingsUpdate,
    salon: dict = Depends(get_current_salon)
):
    """
    Update business hours, booking buffer or timezone
    """
    return await update_salon_settings(salon["id"], settings_update)

@router.get("/{slug}", response_model=PublicSalonResponse)
async def get_public_salon(slug: str):
    """
    Public booking page data: salon details and its active services
    """
    salon = await get_salon_by_slug(slug)
    if not salon:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salon not found"
        )

    salon["services"] = await get_salon_services(salon["id"], active_only=True)
    return salon
