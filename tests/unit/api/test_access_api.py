"""Tests for the access API, admin page gate and audit log endpoint."""

import pytest
from fastapi.testclient import TestClient

from backoffice.api.deps import SESSION_COOKIE
from backoffice.api.main import create_app
from backoffice.core.access import AuditEvent, Department, Principal, Role
from backoffice.core.security import create_access_token
from backoffice.services.audit_writer import SqlAlchemyAuditWriter


class TestHealth:

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_header(self, client: TestClient):
        response = client.get("/admin/login")
        assert "X-Request-ID" in response.headers


class TestAccessEndpoints:
    """Test /api/access endpoints."""

    def test_departments_requires_auth(self, client: TestClient):
        response = client.get("/api/access/departments")
        assert response.status_code == 401

    def test_departments_for_editor(self, client, auth_headers, editor):
        response = client.get("/api/access/departments", headers=auth_headers(editor))
        assert response.status_code == 200
        assert response.json() == [
            {"department": "EDITORIAL", "name": "Editorial", "path": "/admin/editorial"},
        ]

    def test_departments_for_admin(self, client, auth_headers, admin):
        response = client.get("/api/access/departments", headers=auth_headers(admin))
        departments = {d["department"] for d in response.json()}
        assert "SUPER_ADMIN" not in departments
        assert len(departments) == len(Department) - 1

    def test_check_allowed(self, client, auth_headers, editor, audit_sink):
        response = client.get(
            "/api/access/check",
            params={"path": "/admin/editorial/posts"},
            headers={**auth_headers(editor), "X-Forwarded-For": "198.51.100.7, 10.0.0.1"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "allowed"
        assert data["department"] == "EDITORIAL"
        assert audit_sink.events[-1].ip_address == "198.51.100.7"

    def test_check_denied(self, client, auth_headers, editor):
        response = client.get(
            "/api/access/check",
            params={"path": "/admin/customer-service"},
            headers=auth_headers(editor),
        )
        data = response.json()
        assert data["outcome"] == "denied"
        assert data["reason"]

    def test_check_unauthenticated(self, client):
        response = client.get("/api/access/check", params={"path": "/admin/editorial"})
        assert response.status_code == 200
        assert response.json()["outcome"] == "unauthenticated"

    def test_invalid_token_is_no_session(self, client):
        response = client.get(
            "/api/access/check",
            params={"path": "/admin/editorial"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.json()["outcome"] == "unauthenticated"

    def test_pages(self, client, auth_headers, admin):
        response = client.get("/api/access/pages", headers=auth_headers(admin))
        assert response.status_code == 200
        assert "/admin/super" not in response.json()
        assert "/admin/dev" in response.json()


class TestAdminPageGate:
    """Test redirects for /admin pages."""

    def test_unauthenticated_redirects_to_login(self, client):
        response = client.get("/admin/editorial", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"

    def test_denied_redirects_to_access_denied(self, client, auth_headers, editor):
        response = client.get("/admin/marketing", headers=auth_headers(editor), follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/access-denied"

    def test_allowed(self, client, auth_headers, editor):
        response = client.get("/admin/editorial/calendar", headers=auth_headers(editor))
        assert response.status_code == 200
        assert response.json() == {"page": "/admin/editorial/calendar", "department": "EDITORIAL"}

    def test_session_cookie(self, client, settings, admin):
        token = create_access_token(admin, settings)
        response = client.get(
            "/admin/coaching",
            headers={"Cookie": f"{SESSION_COOKIE}={token}"},
            follow_redirects=False,
        )
        assert response.status_code == 200

    def test_login_and_denied_pages_are_open(self, client):
        assert client.get("/admin/login").status_code == 200
        assert client.get("/admin/access-denied").status_code == 200

    def test_audit_event_recorded(self, client, auth_headers, editor, audit_sink):
        client.get("/admin/dev", headers={**auth_headers(editor), "User-Agent": "pytest-agent"},
                   follow_redirects=False)
        event = audit_sink.events[-1]
        assert event.action == "denied"
        assert event.department == Department.DEV
        assert event.user_agent == "pytest-agent"


class TestDepartmentAccessLog:
    """Test the super-admin audit log endpoint."""

    @pytest.fixture
    def seeded_client(self, app, session_factory):
        writer = SqlAlchemyAuditWriter(session_factory)
        for i, action in enumerate(["view", "denied", "view"]):
            writer.write(AuditEvent(
                user_id=f"user-{i}",
                user_email=f"staff{i}@success.com",
                department=Department.EDITORIAL if action == "view" else Department.DEV,
                page_path="/admin/editorial" if action == "view" else "/admin/dev",
                action=action,
            ))

        return TestClient(app)

    def test_super_admin_lists_entries(self, seeded_client, auth_headers, super_admin):
        response = seeded_client.get("/api/audit/department-access", headers=auth_headers(super_admin))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert len(data["items"]) == 3

    def test_filters(self, seeded_client, auth_headers, super_admin):
        response = seeded_client.get(
            "/api/audit/department-access",
            params={"action": "denied", "department": "DEV"},
            headers=auth_headers(super_admin),
        )
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["page_path"] == "/admin/dev"

    def test_pagination(self, seeded_client, auth_headers, super_admin):
        response = seeded_client.get(
            "/api/audit/department-access",
            params={"page": 2, "per_page": 2},
            headers=auth_headers(super_admin),
        )
        data = response.json()
        assert data["total"] == 3
        assert len(data["items"]) == 1

    def test_admin_redirected_to_access_denied(self, seeded_client, auth_headers, admin):
        response = seeded_client.get(
            "/api/audit/department-access", headers=auth_headers(admin), follow_redirects=False
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/access-denied"

    def test_anonymous_redirected_to_login(self, seeded_client):
        response = seeded_client.get("/api/audit/department-access", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"

    def test_unknown_role_token_denied(self, seeded_client, auth_headers):
        principal = Principal(user_id="u9", email="x@success.com", role="JANITOR")
        response = seeded_client.get(
            "/api/audit/department-access", headers=auth_headers(principal), follow_redirects=False
        )
        assert response.headers["location"] == "/admin/access-denied"


class TestSuperAdminPage:

    def test_super_admin_opens_top_department(self, client, auth_headers, super_admin):
        principal = Principal(user_id=super_admin.user_id, email=super_admin.email, role=Role.SUPER_ADMIN)
        response = client.get("/admin/super", headers=auth_headers(principal))
        assert response.status_code == 200
        assert response.json()["department"] == "SUPER_ADMIN"


class TestAuditRoundTrip:
    """Page decisions written by the audit sink are listed by the audit API."""

    @pytest.fixture
    def audited_app(self, settings, session_factory):
        audited = settings.model_copy(update={"audit_enabled": True})
        return create_app(settings=audited, session_factory=session_factory)

    def test_page_decisions_reach_audit_log(self, audited_app, auth_headers, editor, super_admin):
        client = TestClient(audited_app)
        client.get("/admin/dev", headers=auth_headers(editor), follow_redirects=False)
        client.get("/admin/activity-log", headers=auth_headers(super_admin))
        audited_app.state.access_control.audit_sink.shutdown(wait=True)

        response = client.get("/api/audit/department-access", headers=auth_headers(super_admin))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        by_action = {item["action"]: item for item in data["items"]}
        assert by_action["denied"]["department"] == "DEV"
        assert by_action["denied"]["user_email"] == editor.email
        assert by_action["view"]["department"] is None
        assert by_action["view"]["page_path"] == "/admin/activity-log"

    def test_writer_and_query_share_session_factory(self, audited_app, session_factory):
        sink = audited_app.state.access_control.audit_sink
        try:
            assert audited_app.state.session_factory is session_factory
            assert sink.writer.session_factory is session_factory
        finally:
            sink.shutdown(wait=True)


class TestUnassignedAdminPage:

    def test_super_admin_opens_unassigned_page(self, client, auth_headers, super_admin):
        response = client.get("/admin/activity-log", headers=auth_headers(super_admin))
        assert response.status_code == 200
        assert response.json() == {"page": "/admin/activity-log", "department": None}

    def test_admin_redirected_from_unassigned_page(self, client, auth_headers, admin):
        response = client.get("/admin/activity-log", headers=auth_headers(admin), follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/access-denied"
