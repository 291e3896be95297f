from collections.abc import Callable

import structlog
from fastapi import Depends, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from igreja.core.exceptions import (
    CrossTenantAccessException,
    ForbiddenException,
    TenantInactiveException,
    TenantNotFoundException,
    UnauthorizedException,
)
from igreja.database import get_db
from igreja.models.church import SYSTEM_CHURCH_SLUG
from igreja.models.role import Module
from igreja.models.session import AuthSession
from igreja.models.tenant_context import TenantContext
from igreja.repositories.church_repository import ChurchRepository
from igreja.services.route_guard import GuardOutcome, evaluate_operator_route, evaluate_tenant_route
from igreja.services.session_service import SessionService

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> dict:
    """
    Verified claims of the bearer token (signature, expiry, revocation).

    Raises:
        UnauthorizedException: If token missing, invalid, expired or revoked
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")
    return SessionService(db).auth.verify(credentials.credentials)


async def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> AuthSession:
    """
    FastAPI dependency resolving the bearer token into an AuthSession.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate signature and expiry, reject signed-out tokens
    3. Resolve profile and church (fails closed, no partial session)
    4. Return the immutable session snapshot

    Raises:
        UnauthorizedException: Missing/invalid token or orphaned credential
        ForbiddenException: Deactivated profile or church
        TenantNotFoundException: Profile's church vanished
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")
    _, session = SessionService(db).session_from_token(credentials.credentials)
    return session


async def require_super_admin(
    session: AuthSession = Depends(get_current_session),
) -> AuthSession:
    decision = evaluate_operator_route(session)
    if not decision.allowed:
        raise ForbiddenException(decision.notification, redirect_to=decision.redirect_to)
    return session


def require_module(module: Module) -> Callable:
    """
    Dependency factory applying the route guard to /api/{slug}/<module> routes.

    Denials map to errors carrying the frontend redirect:
    other church -> 403 cross_tenant_access, inactive church -> 403
    tenant_inactive, module not allowed -> 403 forbidden.

    Returns:
        Dependency producing the request's TenantContext
    """

    async def dependency(
        slug: str = Path(..., min_length=1, max_length=100),
        session: AuthSession = Depends(get_current_session),
        db: Session = Depends(get_db),
    ) -> TenantContext:
        slug = slug.lower()
        if slug == SYSTEM_CHURCH_SLUG:
            raise TenantNotFoundException(f"Church '{slug}' not found")

        decision = evaluate_tenant_route(session, slug, module.value)
        if not decision.allowed:
            logger.info(
                "guard_denied",
                profile_id=session.principal.id,
                slug=slug,
                module=module.value,
                outcome=decision.outcome.value,
            )
            if decision.outcome == GuardOutcome.REDIRECT_LOGIN:
                raise UnauthorizedException("Not authenticated", redirect_to=decision.redirect_to)
            if decision.outcome == GuardOutcome.REDIRECT_TENANT:
                raise CrossTenantAccessException(
                    "You do not have access to this church", redirect_to=decision.redirect_to
                )
            if decision.outcome == GuardOutcome.INACTIVE_TENANT:
                raise TenantInactiveException(decision.notification, redirect_to=decision.redirect_to)
            raise ForbiddenException(decision.notification, redirect_to=decision.redirect_to)

        church = session.church
        if session.is_super_admin:
            church = ChurchRepository(db).get_by_slug(slug)
            if church is None:
                raise TenantNotFoundException(f"Church '{slug}' not found")

        return TenantContext(session=session, church=church, module=module)

    return dependency
