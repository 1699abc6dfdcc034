"""Unit tests for auth dependencies."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.errors import register_error_handlers
from tests.turismo_core.auth.fakes import FakeCredentialStore
from turismo_core.auth.access_guard import AccessGuard
from turismo_core.auth.dependencies import (
    get_auth_context,
    get_credential_store,
    get_revalidator,
    get_status_cache,
    get_token_codec,
    require_business_access,
    require_roles,
)
from turismo_core.auth.exceptions import Forbidden, Unauthenticated
from turismo_core.auth.token_codec import TokenCodec
from turismo_core.domain.auth import (
    AccountStatus,
    AuthContext,
    Role,
    TokenClaims,
    TouristRecord,
)

SECRET = "test-secret-key-256-bits-long-ok"


@pytest.fixture
def codec():
    return TokenCodec(secret=SECRET)


@pytest.fixture
def guard(codec):
    return AccessGuard(codec)


def _request(headers):
    mock_request = MagicMock()
    mock_request.headers = headers
    mock_request.state = MagicMock(spec=[])
    return mock_request


def _bearer(codec, role, business_id=None):
    token = codec.issue(
        TokenClaims(principal_id=3, role=role, identifier="x", business_id=business_id)
    )
    return {"Authorization": f"Bearer {token}", "X-Request-Id": "req-123"}


class TestGetAuthContext:
    def test_returns_auth_context_from_request_state(self):
        mock_request = MagicMock()
        mock_request.state.auth = AuthContext(
            claims=TokenClaims(principal_id=1, role=Role.TOURIST, identifier="a@x.com"),
            authenticated_at=datetime.now(timezone.utc),
            request_id="req-123",
        )

        assert get_auth_context(mock_request).principal_id == 1

    def test_raises_401_when_not_authenticated(self):
        mock_request = MagicMock()
        mock_request.state = MagicMock(spec=[])

        with pytest.raises(HTTPException) as exc_info:
            get_auth_context(mock_request)

        assert exc_info.value.status_code == 401


class TestRequireRoles:
    def test_admits_role_and_binds_context(self, codec, guard):
        request = _request(_bearer(codec, Role.TOURIST))

        auth = require_roles(Role.TOURIST)(request, guard)

        assert auth.role is Role.TOURIST
        assert auth.request_id == "req-123"
        assert request.state.auth is auth

    def test_rejects_other_role(self, codec, guard):
        request = _request(_bearer(codec, Role.BUSINESS_ADMIN, business_id=5))

        with pytest.raises(Forbidden):
            require_roles(Role.SUPER_ADMIN)(request, guard)

    def test_no_roles_means_any_authenticated(self, codec, guard):
        request = _request(_bearer(codec, Role.SUPER_ADMIN))

        assert require_roles()(request, guard).role is Role.SUPER_ADMIN

    def test_missing_header_is_unauthenticated(self, guard):
        with pytest.raises(Unauthenticated):
            require_roles()(_request({}), guard)

    def test_revalidate_consults_revalidator(self, codec, guard):
        request = _request(_bearer(codec, Role.TOURIST))
        revalidator = MagicMock()
        revalidator.revalidate.side_effect = Unauthenticated("Account is no longer active")

        with pytest.raises(Unauthenticated):
            require_roles(Role.TOURIST, revalidate=True)(request, guard, revalidator)


class TestRequireBusinessAccess:
    def _auth(self, role, business_id=None):
        return AuthContext(
            claims=TokenClaims(principal_id=3, role=role, identifier="x", business_id=business_id),
            authenticated_at=datetime.now(timezone.utc),
            request_id="req-123",
        )

    def test_own_business(self):
        auth = self._auth(Role.BUSINESS_ADMIN, business_id=5)

        assert require_business_access(5, auth) is auth

    def test_other_business_forbidden(self):
        with pytest.raises(Forbidden):
            require_business_access(6, self._auth(Role.BUSINESS_ADMIN, business_id=5))

    def test_super_admin_any_business(self):
        auth = self._auth(Role.SUPER_ADMIN)

        assert require_business_access(6, auth) is auth


class TestGetRevalidator:
    def test_uses_injected_store_and_shared_cache(self):
        first_store = FakeCredentialStore()
        second_store = FakeCredentialStore()

        first = get_revalidator(first_store)
        second = get_revalidator(second_store)

        assert first.store is first_store
        assert second.store is second_store
        assert first.cache is second.cache
        assert first.cache is get_status_cache()

    def test_store_override_reaches_revalidation(self, codec):
        store = FakeCredentialStore()
        store.add(
            TouristRecord(
                id=3,
                email="x",
                password_hash="$2b$10$unused",
                status=AccountStatus.INACTIVE,
                first_name="Ana",
                last_name="Lopez",
            )
        )
        app = FastAPI()

        @app.get("/sensitive")
        def sensitive(auth: AuthContext = Depends(require_roles(Role.TOURIST, revalidate=True))):
            return {"id": auth.principal_id}

        register_error_handlers(app)
        app.dependency_overrides[get_token_codec] = lambda: codec
        app.dependency_overrides[get_credential_store] = lambda: store
        get_status_cache().pop((Role.TOURIST, 3))

        response = TestClient(app).get("/sensitive", headers=_bearer(codec, Role.TOURIST))

        assert response.status_code == 401
        assert store.find_by_id_calls == 1
