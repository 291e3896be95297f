from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class AttendanceCreate(BaseModel):
    """Finalize an attendance call for one room"""

    room_id: int = Field(..., gt=0)
    session_date: date
    present_member_ids: list[int] = Field(default_factory=list)
    absent_member_ids: list[int] = Field(default_factory=list)


class AttendanceResponse(BaseModel):
    """Schema for attendance session response"""

    model_config = {"from_attributes": True}

    id: int
    church_id: int
    room_id: Optional[int]
    room_name: Optional[str]
    session_date: date
    present_member_ids: list[int]
    absent_member_ids: list[int]
    total_present: int
    total_absent: int
    finalized: bool
    created_at: Optional[datetime] = None


class VisitorCreate(BaseModel):
    """Register a visitor during an attendance call"""

    room_id: Optional[int] = Field(None, gt=0)
    session_date: date
    name: str = Field(..., min_length=2, max_length=255)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)


class VisitorResponse(BaseModel):
    """Schema for visitor response"""

    model_config = {"from_attributes": True}

    id: int
    church_id: int
    room_id: Optional[int]
    room_name: Optional[str]
    session_date: date
    name: str
    address: Optional[str]
    phone: Optional[str]
    registered_at: Optional[datetime] = None
