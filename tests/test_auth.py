from igreja.models.auth_credential import RevokedToken
from igreja.models.role import UserRole
from tests.conftest import TEST_PASSWORD, make_church, make_principal


def login(client, email, password=TEST_PASSWORD, slug=None):
    body = {"email": email, "password": password}
    if slug is not None:
        body["slug"] = slug
    return client.post("/api/auth/login", json=body)


def bearer(response) -> dict:
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestLogin:
    """Tests for POST /api/auth/login"""

    def test_login_success(self, client, admin):
        response = login(client, admin.email, slug="acme")

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["session"]["role"] == "admin"
        assert data["session"]["church"]["slug"] == "acme"
        assert data["session"]["dashboard_path"] == "/acme/dashboard"
        assert "configuracoes" in data["session"]["allowed_modules"]

    def test_login_email_case_insensitive(self, client, admin):
        response = login(client, admin.email.upper(), slug="acme")
        assert response.status_code == 200

    def test_login_without_slug(self, client, treasurer):
        response = login(client, treasurer.email)

        assert response.status_code == 200
        assert response.json()["session"]["allowed_modules"] == ["dashboard", "relatorios", "financeiro"]

    def test_wrong_password(self, client, db_session, admin):
        response = login(client, admin.email, password="wrong-password", slug="acme")

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"
        # No token was issued, nothing to revoke
        assert db_session.query(RevokedToken).count() == 0

    def test_unknown_email(self, client, church):
        response = login(client, "nobody@acme.org", slug="acme")
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"

    def test_cross_tenant_login_revokes_token(self, client, db_session, church, other_admin):
        """Principal of 'beta' signing in on the 'acme' login page"""
        response = login(client, other_admin.email, slug="acme")

        assert response.status_code == 403
        assert response.json()["code"] == "cross_tenant_access"
        assert "access_token" not in response.json()
        revoked = db_session.query(RevokedToken).all()
        assert len(revoked) == 1
        assert revoked[0].auth_user_id == other_admin.auth_user_id

    def test_unknown_slug_revokes_token(self, client, db_session, admin):
        response = login(client, admin.email, slug="nowhere")

        assert response.status_code == 404
        assert response.json()["code"] == "tenant_not_found"
        assert db_session.query(RevokedToken).count() == 1

    def test_inactive_church_revokes_token(self, client, db_session):
        church = make_church(db_session, "dormant", is_active=False)
        pastor = make_principal(db_session, church, UserRole.PASTOR)

        response = login(client, pastor.email, slug="dormant")

        assert response.status_code == 403
        assert response.json()["code"] == "tenant_inactive"
        assert db_session.query(RevokedToken).count() == 1

    def test_orphaned_credential_revokes_token(self, client, db_session, church):
        credential = make_principal(db_session, church, with_profile=False)

        response = login(client, credential.email, slug="acme")

        assert response.status_code == 401
        assert response.json()["code"] == "profile_not_found"
        assert db_session.query(RevokedToken).count() == 1

    def test_operator_page_requires_super_admin(self, client, db_session, admin):
        response = login(client, admin.email, slug="superadmin")

        assert response.status_code == 403
        assert response.json()["code"] == "cross_tenant_access"
        assert db_session.query(RevokedToken).count() == 1

    def test_super_admin_login(self, client, super_admin, church, other_church):
        response = login(client, super_admin.email, slug="superadmin")

        assert response.status_code == 200
        session = response.json()["session"]
        assert session["role"] == "super_admin"
        assert session["church"]["slug"] == "superadmin"
        assert session["church"]["id"] == 0
        assert session["dashboard_path"] == "/superadmin"
        assert {c["slug"] for c in session["churches"]} == {"acme", "beta"}

    def test_super_admin_cannot_use_church_login_page(self, client, super_admin, church):
        response = login(client, super_admin.email, slug="acme")
        assert response.status_code == 403


class TestSession:
    """Tests for GET /api/auth/session and POST /api/auth/logout"""

    def test_session_with_workspace(self, client, db_session, admin, church, other_church):
        from igreja.models.room import Room

        db_session.add_all(
            [
                Room(church_id=church.id, name="Jovens", age_group="Jovem"),
                Room(church_id=other_church.id, name="Outra", age_group="Adulto"),
            ]
        )
        db_session.commit()

        headers = bearer(login(client, admin.email, slug="acme"))
        response = client.get("/api/auth/session", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["session"]["principal"]["id"] == admin.id
        assert [room["name"] for room in data["workspace"]["rooms"]] == ["Jovens"]
        assert [p["id"] for p in data["workspace"]["profiles"]] == [admin.id]
        assert data["session"]["permissions"]["treasurer"]["membros"] is False

    def test_super_admin_session_has_no_workspace(self, client, super_admin):
        headers = bearer(login(client, super_admin.email, slug="superadmin"))
        response = client.get("/api/auth/session", headers=headers)

        assert response.status_code == 200
        assert response.json()["workspace"] is None

    def test_logout_revokes_token(self, client, admin):
        headers = bearer(login(client, admin.email, slug="acme"))

        response = client.post("/api/auth/logout", headers=headers)
        assert response.status_code == 200

        response = client.get("/api/auth/session", headers=headers)
        assert response.status_code == 401
        assert "revoked" in response.json()["detail"].lower()

    def test_logout_requires_token(self, client):
        response = client.post("/api/auth/logout")
        assert response.status_code == 401


class TestChangePassword:
    def test_change_password(self, client, admin):
        headers = bearer(login(client, admin.email, slug="acme"))

        response = client.post(
            "/api/auth/change-password",
            json={"current_password": TEST_PASSWORD, "new_password": "nova-senha"},
            headers=headers,
        )
        assert response.status_code == 200

        assert login(client, admin.email, slug="acme").status_code == 401
        assert login(client, admin.email, password="nova-senha", slug="acme").status_code == 200

    def test_wrong_current_password(self, client, admin):
        headers = bearer(login(client, admin.email, slug="acme"))

        response = client.post(
            "/api/auth/change-password",
            json={"current_password": "nope", "new_password": "nova-senha"},
            headers=headers,
        )
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"

    def test_new_password_too_long(self, client, admin):
        headers = bearer(login(client, admin.email, slug="acme"))

        response = client.post(
            "/api/auth/change-password",
            json={"current_password": TEST_PASSWORD, "new_password": "b" * 100},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_failure"
        # Old password still works
        assert login(client, admin.email, slug="acme").status_code == 200

    def test_new_password_too_short(self, client, admin_headers):
        response = client.post(
            "/api/auth/change-password",
            json={"current_password": TEST_PASSWORD, "new_password": "123"},
            headers=admin_headers,
        )
        assert response.status_code == 422


class TestGuardEndpoint:
    """Tests for GET /api/auth/guard"""

    def test_treasurer_members_denied(self, client, treasurer_headers):
        response = client.get("/api/auth/guard", params={"path": "/acme/membros"}, headers=treasurer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "forbidden"
        assert data["allowed"] is False
        assert data["redirect_to"] == "/acme/dashboard"
        assert "permission" in data["notification"].lower()

    def test_upper_case_slug_matches_api(self, client, admin_headers):
        response = client.get("/api/auth/guard", params={"path": "/ACME/membros"}, headers=admin_headers)
        assert response.json()["allowed"] is True

        assert client.get("/api/ACME/membros", headers=admin_headers).status_code == 200

    def test_anonymous_redirected_to_login(self, client):
        response = client.get("/api/auth/guard", params={"path": "/acme/membros"})
        assert response.json()["redirect_to"] == "/acme/login"

    def test_public_path_allowed(self, client):
        response = client.get("/api/auth/guard", params={"path": "/register"})
        assert response.json()["allowed"] is True

    def test_other_church_redirects_home(self, client, other_admin_headers, church):
        response = client.get("/api/auth/guard", params={"path": "/acme/dashboard"}, headers=other_admin_headers)

        assert response.json()["outcome"] == "redirect_tenant"
        assert response.json()["redirect_to"] == "/beta/dashboard"

    def test_inactive_church_interstitial(self, client, db_session, church, pastor_headers):
        church.is_active = False
        db_session.commit()

        for path in ("/acme/dashboard", "/acme/membros", "/acme/configuracoes"):
            response = client.get("/api/auth/guard", params={"path": path}, headers=pastor_headers)
            assert response.json()["outcome"] == "inactive_tenant"

        # Login page stays reachable
        response = client.get("/api/auth/guard", params={"path": "/acme/login"}, headers=pastor_headers)
        assert response.json()["allowed"] is True


class TestPasswordHandlersRunInThreadpool:
    """Handlers that hash or check passwords are plain functions so bcrypt never blocks the event loop"""

    def test_handlers_are_synchronous(self):
        import inspect
        from igreja.routes import auth_routes, settings_routes

        for handler in (
            auth_routes.login,
            auth_routes.change_password,
            auth_routes.register,
            settings_routes.create_user,
        ):
            assert not inspect.iscoroutinefunction(handler), handler.__name__
