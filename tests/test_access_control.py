"""
Role guards and request-shape handling shared by every resource.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from inventory.core.auth import SessionContext, current_user_id
from inventory.core.exceptions import StorageError
from inventory.main import app
from inventory.routers import auth as auth_router
from inventory.routers import categories as categories_router


class TestUnauthenticatedAccess:
    """Protected endpoints return 401 without a session."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/categories"),
            ("POST", "/api/categories"),
            ("GET", "/api/equipment"),
            ("GET", "/api/equipment?action=statistics"),
            ("DELETE", "/api/equipment?id=1"),
            ("GET", "/api/images?product_id=1"),
            ("GET", "/api/cart"),
            ("POST", "/api/cart"),
            ("GET", "/api/users"),
            ("GET", "/api/profile"),
            ("PUT", "/api/profile?action=password"),
        ],
    )
    def test_requires_auth(self, anon_api, method, path):
        resp = anon_api.request(method, path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json() == {"error": "Unauthorised. Please log in."}


class TestClientDeniedAdminOperations:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/categories"),
            ("PUT", "/api/categories?id=1"),
            ("DELETE", "/api/categories?id=1"),
            ("POST", "/api/equipment"),
            ("PUT", "/api/equipment?id=1"),
            ("DELETE", "/api/equipment?id=1"),
            ("GET", "/api/equipment?action=statistics"),
            ("DELETE", "/api/images?id=1"),
            ("PUT", "/api/images?id=1&action=primary"),
            ("GET", "/api/users"),
            ("POST", "/api/users"),
            ("DELETE", "/api/users?id=1"),
        ],
    )
    def test_forbidden(self, client_api, method, path):
        resp = client_api.request(method, path, json={})
        assert resp.status_code == 403, f"{method} {path} returned {resp.status_code}"
        assert resp.json() == {"error": "Forbidden: admin access required."}


class TestAdminDeniedCart:
    def test_admin_cannot_use_cart(self, admin_api):
        resp = admin_api.get("/api/cart")
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden: only clients can access the shopping cart."}


class TestRequestShape:
    def test_guard_runs_before_content_type_check(self, anon_api):
        resp = anon_api.post("/api/categories", content=b"name=x")
        assert resp.status_code == 401

    def test_non_json_body_is_415(self, admin_api):
        resp = admin_api.post(
            "/api/categories",
            content=b"name=Laptops",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert resp.status_code == 415
        assert resp.json() == {"error": "Content-Type must be application/json."}

    def test_malformed_json_is_400(self, admin_api):
        resp = admin_api.post(
            "/api/categories",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Malformed JSON body."}

    def test_json_array_body_is_400(self, admin_api):
        resp = admin_api.post("/api/categories", json=["Laptops"])
        assert resp.status_code == 400

    def test_non_integer_id_is_400(self, admin_api):
        resp = admin_api.get("/api/equipment?id=abc")
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Invalid request: ")

    def test_missing_id_on_delete_is_400(self, admin_api):
        resp = admin_api.delete("/api/categories")
        assert resp.status_code == 400
        assert resp.json() == {"error": "id query parameter is required."}

    def test_unknown_action_is_404(self, admin_api):
        resp = admin_api.get("/api/equipment?action=export")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Route not found."}

    def test_error_responses_are_not_cached(self, anon_api):
        resp = anon_api.get("/api/equipment")
        assert "no-store" in resp.headers["cache-control"]


class TestCurrentUser:
    def test_anonymous_has_no_id(self):
        assert current_user_id(None) is None

    def test_session_id(self):
        ctx = SessionContext(user_id=7, username="admin", role="admin")
        assert current_user_id(ctx) == 7


class TestServerErrors:
    def test_storage_error_is_500(self, admin_api, monkeypatch):
        def fail(session):
            raise StorageError("disk full")

        monkeypatch.setattr(categories_router.service.repo, "find_all", fail)
        resp = admin_api.get("/api/categories")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Database error: disk full"}

    def test_driver_error_is_500(self, admin_api, monkeypatch):
        def fail(session):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(categories_router.service.repo, "find_all", fail)
        resp = admin_api.get("/api/categories")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Database error: database is locked"}

    def test_unexpected_error_is_500_without_traceback(self, monkeypatch):
        def fail(session, payload):
            raise RuntimeError("boom")

        monkeypatch.setattr(auth_router.service, "authenticate", fail)
        api = TestClient(app, raise_server_exceptions=False)
        resp = api.post("/api/auth?action=login", json={"username": "x", "password": "y"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error: boom"}
        assert "Traceback" not in resp.text
