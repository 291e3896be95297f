import pytest
from igreja.models.church import Church, system_church
from igreja.models.permission_matrix import PermissionMatrix
from igreja.models.profile import Profile
from igreja.models.role import Module, UserRole
from igreja.models.session import AuthSession
from igreja.services.route_guard import (
    PERMISSION_DENIED_MESSAGE,
    GuardOutcome,
    evaluate_route,
    split_path,
)


def build_session(
    role: UserRole = UserRole.ADMIN,
    slug: str = "acme",
    is_active: bool = True,
    permissions: PermissionMatrix | None = None,
) -> AuthSession:
    """Session snapshot over transient rows (no database needed)"""
    if role == UserRole.SUPER_ADMIN:
        principal = Profile(id=99, auth_user_id="root", church_id=None, name="Root", email="root@x.org", role=role)
        return AuthSession(principal=principal, church=system_church(), permissions=PermissionMatrix.default())

    church = Church(id=1, name="Acme", slug=slug, is_active=is_active)
    principal = Profile(id=1, auth_user_id="user-1", church_id=1, name="User", email="u@x.org", role=role)
    return AuthSession(
        principal=principal,
        church=church,
        permissions=permissions or PermissionMatrix.default(),
    )


class TestPublicRoutes:
    @pytest.mark.parametrize("path", ["/", "/register", "/acme/login", "/superadmin/login"])
    def test_public_without_session(self, path):
        assert evaluate_route(None, path).allowed


class TestUnauthenticated:
    def test_redirects_to_church_login(self):
        decision = evaluate_route(None, "/acme/membros")
        assert decision.outcome == GuardOutcome.REDIRECT_LOGIN
        assert decision.redirect_to == "/acme/login"

    def test_operator_namespace_redirects_to_operator_login(self):
        decision = evaluate_route(None, "/superadmin")
        assert decision.outcome == GuardOutcome.REDIRECT_LOGIN
        assert decision.redirect_to == "/superadmin/login"


class TestTenantMismatch:
    def test_other_church_redirects_to_own_dashboard(self):
        decision = evaluate_route(build_session(slug="acme"), "/beta/membros")
        assert decision.outcome == GuardOutcome.REDIRECT_TENANT
        assert decision.redirect_to == "/acme/dashboard"

    def test_slug_case_ignored(self):
        decision = evaluate_route(build_session(slug="acme"), "/ACME/membros")
        assert decision.allowed

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.PASTOR, UserRole.TREASURER])
    def test_mismatch_applies_to_every_tenant_role(self, role):
        decision = evaluate_route(build_session(role), "/beta/dashboard")
        assert decision.redirect_to == "/acme/dashboard"

    def test_super_admin_may_browse_any_church(self):
        assert evaluate_route(build_session(UserRole.SUPER_ADMIN), "/beta/financeiro").allowed


class TestInactiveTenant:
    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.PASTOR, UserRole.SECRETARY, UserRole.TREASURER])
    @pytest.mark.parametrize("module", ["dashboard", "membros", "financeiro", "configuracoes", "inventario", None])
    def test_interstitial_regardless_of_role_and_module(self, role, module):
        path = "/acme" if module is None else f"/acme/{module}"
        decision = evaluate_route(build_session(role, is_active=False), path)
        assert decision.outcome == GuardOutcome.INACTIVE_TENANT
        assert decision.redirect_to is None


class TestModulePermission:
    def test_treasurer_members_redirects_to_dashboard(self):
        decision = evaluate_route(build_session(UserRole.TREASURER), "/acme/membros")
        assert decision.outcome == GuardOutcome.FORBIDDEN
        assert decision.redirect_to == "/acme/dashboard"
        assert decision.notification == PERMISSION_DENIED_MESSAGE

    def test_treasurer_financial_allowed(self):
        assert evaluate_route(build_session(UserRole.TREASURER), "/acme/financeiro").allowed

    def test_unknown_module_forbidden(self):
        decision = evaluate_route(build_session(UserRole.ADMIN), "/acme/inventario")
        assert decision.outcome == GuardOutcome.FORBIDDEN

    def test_missing_module_redirects_to_dashboard(self):
        decision = evaluate_route(build_session(UserRole.PASTOR), "/acme")
        assert decision.outcome == GuardOutcome.REDIRECT_DASHBOARD
        assert decision.redirect_to == "/acme/dashboard"

    def test_nested_paths_use_second_segment(self):
        assert evaluate_route(build_session(UserRole.SECRETARY), "/acme/membros/12/editar?tab=1").allowed

    def test_stored_matrix_is_consulted(self):
        matrix = PermissionMatrix.default().with_role_flags(UserRole.PASTOR, {"financeiro": True})
        session = build_session(UserRole.PASTOR, permissions=matrix)

        assert evaluate_route(session, "/acme/financeiro").allowed
        assert not evaluate_route(session, "/acme/membros").allowed

    @pytest.mark.parametrize("module", list(Module))
    def test_every_denied_pair_redirects(self, module):
        session = build_session(UserRole.TREASURER)
        decision = evaluate_route(session, f"/acme/{module.value}")
        assert decision.allowed == session.can_access(module)
        if not decision.allowed:
            assert decision.redirect_to == "/acme/dashboard"


class TestOperatorNamespace:
    def test_super_admin_allowed(self):
        assert evaluate_route(build_session(UserRole.SUPER_ADMIN), "/superadmin").allowed

    def test_church_admin_sent_home(self):
        decision = evaluate_route(build_session(UserRole.ADMIN), "/superadmin")
        assert decision.outcome == GuardOutcome.FORBIDDEN
        assert decision.redirect_to == "/"


def test_split_path_ignores_query_and_fragment():
    assert split_path("/acme/membros/12/?tab=1#top") == ["acme", "membros", "12"]
