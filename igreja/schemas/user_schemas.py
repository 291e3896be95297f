from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from igreja.models.role import UserRole
from igreja.schemas.church_schemas import EMAIL_PATTERN


class ProfileResponse(BaseModel):
    """Principal profile response"""

    id: int
    auth_user_id: str
    church_id: Optional[int]
    name: str
    email: str
    role: UserRole
    is_active: bool
    avatar: Optional[str]
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Create a church user with a password (ADMIN only)"""

    name: str = Field(..., min_length=3, max_length=255)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = Field(default=UserRole.SECRETARY)


class UserUpdate(BaseModel):
    """Update a church user (ADMIN only)"""

    name: Optional[str] = Field(None, min_length=3, max_length=255)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    avatar: Optional[str] = Field(None, max_length=500)
