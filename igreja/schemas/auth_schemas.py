from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from igreja.models.role import UserRole
from igreja.schemas.attendance_schemas import AttendanceResponse, VisitorResponse
from igreja.schemas.church_schemas import ChurchResponse
from igreja.schemas.finance_schemas import TransactionResponse
from igreja.schemas.member_schemas import MemberResponse
from igreja.schemas.room_schemas import RoomResponse
from igreja.schemas.user_schemas import ProfileResponse


class LoginRequest(BaseModel):
    """Credentials posted from a church (or operator) login page"""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    slug: Optional[str] = Field(
        None, max_length=100, description="Church slug of the login page, or 'superadmin'"
    )


class SessionResponse(BaseModel):
    """Resolved session snapshot"""

    principal: ProfileResponse
    church: ChurchResponse
    role: UserRole
    permissions: dict[str, dict[str, bool]]
    allowed_modules: list[str]
    dashboard_path: str
    churches: list[ChurchResponse] = []


class TokenResponse(BaseModel):
    """Access token issued at login"""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    session: SessionResponse


class WorkspaceResponse(BaseModel):
    """Every tenant-scoped collection of the session's church"""

    profiles: list[ProfileResponse]
    rooms: list[RoomResponse]
    members: list[MemberResponse]
    transactions: list[TransactionResponse]
    attendance_sessions: list[AttendanceResponse]
    visitors: list[VisitorResponse]


class SessionWorkspaceResponse(BaseModel):
    session: SessionResponse
    workspace: Optional[WorkspaceResponse] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)


class GuardResponse(BaseModel):
    """Navigation decision for a frontend path"""

    outcome: str
    allowed: bool
    redirect_to: Optional[str] = None
    notification: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
