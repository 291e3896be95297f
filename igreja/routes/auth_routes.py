from fastapi import APIRouter, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from igreja.core.exceptions import IgrejaException, TenantInactiveException
from igreja.database import get_db
from igreja.dependencies import get_current_session, get_token_claims, security
from igreja.models.session import AuthSession
from igreja.schemas.auth_schemas import (
    ChangePasswordRequest,
    GuardResponse,
    LoginRequest,
    MessageResponse,
    SessionResponse,
    SessionWorkspaceResponse,
    TokenResponse,
)
from igreja.schemas.church_schemas import RegistrationRequest, RegistrationResponse
from igreja.services.registration_service import RegistrationService
from igreja.services.route_guard import (
    INACTIVE_TENANT_MESSAGE,
    GuardDecision,
    GuardOutcome,
    evaluate_route,
)
from igreja.services.session_service import SessionService

router = APIRouter()


def session_payload(session: AuthSession) -> dict:
    """Serializable view of a session snapshot"""
    permissions = {}
    if not session.is_super_admin:
        permissions = {
            role.value: session.permissions.flags_for(role) for role in session.permissions.table
        }
    return {
        "principal": session.principal,
        "church": session.church,
        "role": session.role,
        "permissions": permissions,
        "allowed_modules": [m.value for m in session.permissions.allowed_modules(session.role)],
        "dashboard_path": session.dashboard_path(),
        "churches": list(session.churches),
    }


@router.post("/auth/login", response_model=TokenResponse)
def login(login_request: LoginRequest, db: Session = Depends(get_db)):
    """
    Sign in from a church login page (or /superadmin/login).

    - **slug**: church of the login page; the user must belong to it
    - Rejections after credential verification revoke the issued token
    """
    service = SessionService(db)
    issued, session = service.login(login_request.email, login_request.password, login_request.slug)
    return {
        "access_token": issued.access_token,
        "token_type": "bearer",
        "expires_at": issued.expires_at,
        "session": session_payload(session),
    }


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(claims: dict = Depends(get_token_claims), db: Session = Depends(get_db)):
    """Revoke the presented token"""
    SessionService(db).logout(claims)
    return {"message": "Signed out"}


@router.get("/auth/session", response_model=SessionWorkspaceResponse)
async def get_session(
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Current session plus every tenant-scoped collection of its church.

    The workspace is omitted for SUPER_ADMIN, whose session lists all churches.
    """
    workspace = SessionService(db).load_workspace(session)
    return {
        "session": session_payload(session),
        "workspace": None
        if workspace is None
        else {
            "profiles": list(workspace.profiles),
            "rooms": list(workspace.rooms),
            "members": list(workspace.members),
            "transactions": list(workspace.transactions),
            "attendance_sessions": list(workspace.attendance_sessions),
            "visitors": list(workspace.visitors),
        },
    }


@router.post("/auth/change-password", response_model=MessageResponse)
def change_password(
    password_change: ChangePasswordRequest,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Change the signed-in user's password (current password required)"""
    SessionService(db).auth.change_password(
        session.principal.auth_user_id,
        password_change.current_password,
        password_change.new_password,
    )
    return {"message": "Password changed"}


@router.get("/auth/guard", response_model=GuardResponse)
async def check_route(
    path: str = Query(..., min_length=1, description="Frontend path, e.g. /acme/membros"),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    """
    Navigation decision for a frontend path.

    Never fails: an absent or invalid token is treated as no session.
    """
    session = None
    decision = None
    if credentials is not None:
        try:
            _, session = SessionService(db).session_from_token(credentials.credentials)
        except TenantInactiveException:
            decision = GuardDecision(GuardOutcome.INACTIVE_TENANT, notification=INACTIVE_TENANT_MESSAGE)
        except IgrejaException:
            session = None

    if decision is None or evaluate_route(None, path).allowed:
        decision = evaluate_route(session, path)

    return {
        "outcome": decision.outcome.value,
        "allowed": decision.allowed,
        "redirect_to": decision.redirect_to,
        "notification": decision.notification,
    }


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(registration: RegistrationRequest, db: Session = Depends(get_db)):
    """
    Register a church and its first administrator.

    - Slug generated from the church name when omitted
    - All-or-nothing: a taken slug or email leaves no rows behind
    """
    church, profile = RegistrationService(db).register(registration)
    return {
        "church": church,
        "admin_profile_id": profile.id,
        "login_path": f"/{church.slug}/login",
    }
