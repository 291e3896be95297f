from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from igreja.models.role import PlanType

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ChurchResponse(BaseModel):
    """Church details response"""

    id: int
    name: str
    slug: str
    cnpj: Optional[str]
    city: Optional[str]
    state: Optional[str]
    address: Optional[str]
    phone: Optional[str]
    pastor: Optional[str]
    admin_name: Optional[str]
    admin_email: Optional[str]
    logo: Optional[str]
    plan: PlanType
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ChurchUpdate(BaseModel):
    """Update church details (ADMIN only)"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    cnpj: Optional[str] = Field(None, max_length=18)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    pastor: Optional[str] = Field(None, max_length=255)
    logo: Optional[str] = Field(None, max_length=500)


class RegistrationRequest(BaseModel):
    """Self-service registration of a church and its first administrator"""

    church_name: str = Field(..., min_length=3, max_length=255)
    slug: Optional[str] = Field(
        None, max_length=100, description="Generated from church_name when omitted"
    )
    cnpj: Optional[str] = Field(None, max_length=18)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    pastor: Optional[str] = Field(None, max_length=255)
    admin_name: str = Field(..., min_length=3, max_length=255)
    admin_email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)


class RegistrationResponse(BaseModel):
    """Result of a successful registration"""

    church: ChurchResponse
    admin_profile_id: int
    login_path: str


class ChurchSummary(ChurchResponse):
    """Church row in the super admin listing"""

    members_count: int = 0


class ChurchStatusUpdate(BaseModel):
    """Activate or deactivate a church (SUPER_ADMIN only)"""

    is_active: bool


class PlatformStats(BaseModel):
    """Platform-wide counters for the super admin panel"""

    total_churches: int
    active_churches: int
    inactive_churches: int
    total_members: int
