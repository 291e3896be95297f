from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    """Schema for creating a room"""

    name: str = Field(..., min_length=1, max_length=255)
    age_group: str = Field(..., min_length=1, max_length=50)
    is_active: bool = True


class RoomUpdate(BaseModel):
    """Schema for updating a room"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    age_group: Optional[str] = Field(None, min_length=1, max_length=50)
    is_active: Optional[bool] = None


class RoomResponse(BaseModel):
    """Schema for room response"""

    model_config = {"from_attributes": True}

    id: int
    church_id: int
    name: str
    age_group: str
    is_active: bool
    created_at: Optional[datetime] = None
