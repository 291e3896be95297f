"""
Navigation guard for church-scoped and operator routes.

Pure, synchronous decisions over (session, URL): no I/O, no exceptions.
Callers turn a decision into a redirect (frontends) or an HTTP error
(see dependencies.require_module).
"""

from dataclasses import dataclass
from enum import Enum

from igreja.models.church import SYSTEM_CHURCH_SLUG
from igreja.models.role import Module
from igreja.models.session import AuthSession

PUBLIC_ROOT_SEGMENTS = {"register"}
LOGIN_SEGMENT = "login"

PERMISSION_DENIED_MESSAGE = "You do not have permission to access this module."
INACTIVE_TENANT_MESSAGE = (
    "This church is currently inactive. Contact support to restore access."
)


class GuardOutcome(str, Enum):
    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_TENANT = "redirect_tenant"
    INACTIVE_TENANT = "inactive_tenant"
    FORBIDDEN = "forbidden"
    REDIRECT_DASHBOARD = "redirect_dashboard"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    redirect_to: str | None = None
    notification: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome == GuardOutcome.ALLOW


ALLOW = GuardDecision(GuardOutcome.ALLOW)


def split_path(path: str) -> list[str]:
    """'/acme/membros/12?tab=1' -> ['acme', 'membros', '12']"""
    path = path.split("?", 1)[0].split("#", 1)[0]
    return [segment for segment in path.split("/") if segment]


def evaluate_route(session: AuthSession | None, path: str) -> GuardDecision:
    """
    Decide whether the principal may see the page at path.

    Public pages (landing, registration, login pages) are always allowed.
    /superadmin/... is reserved to SUPER_ADMIN; /<slug>/<module>/... goes
    through evaluate_tenant_route.
    """
    segments = split_path(path)
    if not segments or (len(segments) == 1 and segments[0] in PUBLIC_ROOT_SEGMENTS):
        return ALLOW

    # Slugs are stored lower-case
    slug = segments[0].lower()
    module_key = segments[1] if len(segments) > 1 else None

    if module_key == LOGIN_SEGMENT:
        return ALLOW

    if slug == SYSTEM_CHURCH_SLUG:
        return evaluate_operator_route(session)

    return evaluate_tenant_route(session, slug, module_key)


def evaluate_operator_route(session: AuthSession | None) -> GuardDecision:
    if session is None:
        return GuardDecision(GuardOutcome.REDIRECT_LOGIN, redirect_to=f"/{SYSTEM_CHURCH_SLUG}/login")
    if not session.is_super_admin:
        return GuardDecision(
            GuardOutcome.FORBIDDEN, redirect_to="/", notification=PERMISSION_DENIED_MESSAGE
        )
    return ALLOW


def evaluate_tenant_route(
    session: AuthSession | None, slug: str, module_key: str | None
) -> GuardDecision:
    """
    Run the church route checks in order.

    1. no session -> church login page
    2. session church differs from slug -> own dashboard (SUPER_ADMIN exempt)
    3. church inactive -> inactive interstitial, whatever the module
       (SUPER_ADMIN exempt)
    4. no module segment -> dashboard
    5. module not allowed for the role, or unknown -> dashboard with a
       permission-denied notification
    """
    if session is None:
        return GuardDecision(GuardOutcome.REDIRECT_LOGIN, redirect_to=f"/{slug}/login")

    if not session.is_super_admin:
        if session.church.slug != slug:
            return GuardDecision(GuardOutcome.REDIRECT_TENANT, redirect_to=session.dashboard_path())
        if not session.church.is_active:
            return GuardDecision(
                GuardOutcome.INACTIVE_TENANT, notification=INACTIVE_TENANT_MESSAGE
            )

    dashboard = f"/{slug}/{Module.DASHBOARD.value}"
    if module_key is None:
        return GuardDecision(GuardOutcome.REDIRECT_DASHBOARD, redirect_to=dashboard)

    if not session.can_access(Module.from_key(module_key)):
        return GuardDecision(
            GuardOutcome.FORBIDDEN, redirect_to=dashboard, notification=PERMISSION_DENIED_MESSAGE
        )

    return ALLOW
