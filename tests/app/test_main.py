"""
Unit tests for the FastAPI application.

These tests verify that the app mounts the auth and admin routers,
and that the health endpoint works.
"""

import pytest
from fastapi.testclient import TestClient


class TestAppHealth:
    """Tests for the health endpoint."""

    def test_health_endpoint_returns_ok(self, test_client):
        """The /health endpoint should return status ok."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_endpoint_includes_service_name(self, test_client):
        response = test_client.get("/health")

        assert response.json()["service"] == "turismo-auth"

    def test_health_is_public(self, test_client):
        """No bearer token is needed for /health."""
        response = test_client.get("/health")

        assert "timestamp" in response.json()


class TestAppRouterMounting:
    """Tests for router mounting under correct prefixes."""

    def test_auth_router_mounted_under_auth_prefix(self, test_client):
        # /auth/me exists and answers 401 without a token
        response = test_client.get("/auth/me")

        assert response.status_code == 401

    def test_admin_router_mounted_under_admin_prefix(self, test_client):
        response = test_client.get("/admin/businesses/1/access")

        assert response.status_code == 401

    def test_error_body_shape(self, test_client):
        """Service errors are rendered as {code, message, debug_id}."""
        body = test_client.get("/auth/me").json()

        assert set(body) == {"code", "message", "debug_id"}


class TestAppCORS:
    """Tests for CORS configuration."""

    def test_cors_allows_localhost_origin(self, test_client):
        """CORS should allow requests from localhost development servers."""
        response = test_client.options(
            "/health",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert "access-control-allow-origin" in response.headers


class TestAppOpenAPI:
    """Tests for OpenAPI documentation."""

    def test_openapi_lists_login_routes(self, test_client):
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/auth/tourist/login" in paths
        assert "/auth/business-admin/login" in paths
        assert "/auth/super-admin/login" in paths


# --- Fixtures ---


@pytest.fixture
def test_client():
    """
    Provides a TestClient for the FastAPI app with a test signing secret.
    """
    from app.main import app
    from turismo_core.auth.dependencies import get_token_codec
    from turismo_core.auth.token_codec import TokenCodec

    app.dependency_overrides[get_token_codec] = lambda: TokenCodec(secret="test-secret")
    yield TestClient(app)
    app.dependency_overrides.clear()
