from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0)  # Duration in minutes
    price: float = Field(..., ge=0)
    description: Optional[str] = None
    category: Optional[str] = None  # e.g., 'Hair', 'Nails'
    isActive: bool = True
    displayOrder: int = 0

class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    duration: Optional[int] = Field(None, gt=0)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    isActive: Optional[bool] = None
    displayOrder: Optional[int] = None

class ServiceResponse(BaseModel):
    id: str
    salonId: str
    name: str
    duration: int
    price: float
    description: Optional[str] = None
    category: Optional[str] = None
    isActive: bool
    displayOrder: int = 0
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
