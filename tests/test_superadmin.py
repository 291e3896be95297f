from igreja.models.auth_credential import AuthCredential
from igreja.models.church import Church
from igreja.models.member import Member
from igreja.models.profile import Profile
from igreja.models.room import Room

BASE = "/api/superadmin"


def add_members(db_session, church, count):
    db_session.add_all(Member(church_id=church.id, full_name=f"Membro {i}") for i in range(count))
    db_session.commit()


class TestChurchListing:
    """Tests for GET /api/superadmin/churches"""

    def test_list_with_member_counts(self, client, db_session, church, other_church, super_admin_headers):
        add_members(db_session, church, 3)
        add_members(db_session, other_church, 1)

        response = client.get(f"{BASE}/churches", headers=super_admin_headers)

        assert response.status_code == 200
        counts = {row["slug"]: row["members_count"] for row in response.json()}
        assert counts == {"acme": 3, "beta": 1}

    def test_search(self, client, church, other_church, super_admin_headers):
        response = client.get(f"{BASE}/churches", params={"search": "bet"}, headers=super_admin_headers)
        assert [row["slug"] for row in response.json()] == ["beta"]

    def test_church_admin_forbidden(self, client, admin_headers):
        response = client.get(f"{BASE}/churches", headers=admin_headers)

        assert response.status_code == 403
        assert response.json()["redirect_to"] == "/"

    def test_anonymous_unauthorized(self, client):
        assert client.get(f"{BASE}/churches").status_code == 401

    def test_stats(self, client, db_session, church, other_church, super_admin_headers):
        add_members(db_session, church, 2)
        other_church.is_active = False
        db_session.commit()

        response = client.get(f"{BASE}/stats", headers=super_admin_headers)

        assert response.json() == {
            "total_churches": 2,
            "active_churches": 1,
            "inactive_churches": 1,
            "total_members": 2,
        }


class TestChurchStatus:
    def test_deactivate_blocks_church_users(self, client, church, admin_headers, super_admin_headers):
        response = client.patch(
            f"{BASE}/churches/{church.id}/status", json={"is_active": False}, headers=super_admin_headers
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        for path in ("/api/acme/dashboard", "/api/acme/membros", "/api/acme/configuracoes/rooms"):
            blocked = client.get(path, headers=admin_headers)
            assert blocked.status_code == 403
            assert blocked.json()["code"] == "tenant_inactive"
            assert blocked.json()["redirect_to"] == "/acme/login"

        # Super admin still reaches the church
        assert client.get("/api/acme/membros", headers=super_admin_headers).status_code == 200

    def test_reactivate(self, client, db_session, church, admin_headers, super_admin_headers):
        church.is_active = False
        db_session.commit()

        client.patch(f"{BASE}/churches/{church.id}/status", json={"is_active": True}, headers=super_admin_headers)

        assert client.get("/api/acme/dashboard", headers=admin_headers).status_code == 200

    def test_unknown_church(self, client, super_admin_headers):
        response = client.patch(f"{BASE}/churches/999/status", json={"is_active": False}, headers=super_admin_headers)
        assert response.status_code == 404


class TestDeleteChurch:
    def test_cascade_delete(self, client, db_session, church, other_church, admin, pastor, other_admin, super_admin_headers):
        db_session.add(Room(church_id=church.id, name="Jovens", age_group="Jovem"))
        add_members(db_session, church, 2)

        response = client.delete(f"{BASE}/churches/{church.id}", headers=super_admin_headers)

        assert response.status_code == 204
        assert db_session.query(Church).filter_by(slug="acme").first() is None
        assert db_session.query(Member).count() == 0
        assert db_session.query(Room).count() == 0
        assert [p.id for p in db_session.query(Profile).filter(Profile.church_id.isnot(None)).all()] == [other_admin.id]
        emails = {c.email for c in db_session.query(AuthCredential).all()}
        assert emails == {other_admin.email, "root@platform.org"}

    def test_church_admin_cannot_delete(self, client, db_session, church, admin_headers):
        response = client.delete(f"{BASE}/churches/{church.id}", headers=admin_headers)

        assert response.status_code == 403
        assert db_session.query(Church).count() == 1
