from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field
from igreja.models.member import MemberStatus


class MemberCreate(BaseModel):
    """Schema for creating a member"""

    full_name: str = Field(..., min_length=3, max_length=255)
    photo: Optional[str] = Field(None, max_length=500)
    cpf: Optional[str] = Field(None, max_length=14)
    birth_date: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=255)
    baptism_date: Optional[date] = None
    join_date: Optional[date] = None
    room_id: Optional[int] = Field(None, gt=0)
    status: MemberStatus = MemberStatus.ACTIVE


class MemberUpdate(BaseModel):
    """Schema for updating a member"""

    full_name: Optional[str] = Field(None, min_length=3, max_length=255)
    photo: Optional[str] = Field(None, max_length=500)
    cpf: Optional[str] = Field(None, max_length=14)
    birth_date: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=255)
    baptism_date: Optional[date] = None
    join_date: Optional[date] = None
    room_id: Optional[int] = Field(None, gt=0)
    status: Optional[MemberStatus] = None


class MemberResponse(BaseModel):
    """Schema for member response"""

    model_config = {"from_attributes": True}

    id: int
    church_id: int
    room_id: Optional[int]
    full_name: str
    photo: Optional[str]
    cpf: Optional[str]
    birth_date: Optional[date]
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    baptism_date: Optional[date]
    join_date: Optional[date]
    age_group: str
    status: MemberStatus
    created_at: Optional[datetime] = None


class MemberListResponse(BaseModel):
    """Schema for list of members"""

    members: list[MemberResponse]
    total: int
