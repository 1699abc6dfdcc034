"""Unit tests for PostgresCredentialStore."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import psycopg
import pytest

from turismo_core.auth.credential_store import PostgresCredentialStore
from turismo_core.auth.exceptions import DuplicateIdentifier, UpstreamUnavailable
from turismo_core.domain.auth import (
    AccountStatus,
    BusinessAdminRecord,
    Role,
    SuperAdminRecord,
    TouristProfile,
    TouristRecord,
)


def _mock_connection(mock_cursor):
    mock_conn = MagicMock()
    mock_conn.__enter__ = MagicMock(return_value=mock_conn)
    mock_conn.__exit__ = MagicMock(return_value=False)
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn


class TestLookup:
    """Tests for principal lookups."""

    def test_find_tourist_by_email(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = (
            10, "ana@x.com", "$2b$10$hash", "active", "Ana", "Lopez", None, "PE", "Lima",
        )
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            record = store.find_by_identifier(Role.TOURIST, "ana@x.com")

        assert isinstance(record, TouristRecord)
        assert record.id == 10
        assert record.status is AccountStatus.ACTIVE
        sql, params = mock_cursor.execute.call_args[0]
        assert "FROM tourists" in sql
        assert "email = %s" in sql
        assert params == ("ana@x.com",)

    def test_find_business_admin_joins_business(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = (
            20, "owner@cafe.com", "$2b$10$hash", "inactive", 5, "Luis", "Perez",
            "Cafe Central", '{"reviews": true}',
        )
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            record = store.find_by_identifier(Role.BUSINESS_ADMIN, "owner@cafe.com")

        assert isinstance(record, BusinessAdminRecord)
        assert record.business_id == 5
        assert record.status is AccountStatus.INACTIVE
        assert record.permissions == {"reviews": True}
        sql = mock_cursor.execute.call_args[0][0]
        assert "JOIN businesses" in sql
        assert "ba.email = %s" in sql

    def test_find_super_admin_by_username(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = (
            1, "root", "$2b$10$hash", "active", "Platform Admin", "total", None, None,
        )
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            record = store.find_by_identifier(Role.SUPER_ADMIN, "root")

        assert isinstance(record, SuperAdminRecord)
        assert record.access_level == "total"
        sql = mock_cursor.execute.call_args[0][0]
        assert "username = %s" in sql

    def test_unknown_status_reads_as_inactive(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = (
            10, "ana@x.com", "$2b$10$hash", "suspended", "Ana", "Lopez", None, None, None,
        )
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            record = store.find_by_identifier(Role.TOURIST, "ana@x.com")

        assert record.status is AccountStatus.INACTIVE

    def test_not_found_returns_none(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = None
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            assert store.find_by_id(Role.TOURIST, 99) is None


class TestWrites:
    """Tests for inserts and last-seen updates."""

    def test_insert_tourist_returns_id_and_defaults_active(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = (42,)
        store = PostgresCredentialStore(dsn="mock://")
        profile = TouristProfile(first_name="Ana", last_name="Lopez", email="a@x.com")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            new_id = store.insert(Role.TOURIST, profile, "$2b$10$hash")

        assert new_id == 42
        sql, params = mock_cursor.execute.call_args[0]
        assert "INSERT INTO tourists" in sql
        assert params[-1] == "active"

    def test_insert_profile_role_mismatch_raises(self):
        store = PostgresCredentialStore(dsn="mock://")
        profile = TouristProfile(first_name="Ana", last_name="Lopez", email="a@x.com")

        with pytest.raises(ValueError):
            store.insert(Role.BUSINESS_ADMIN, profile, "$2b$10$hash")

    def test_unique_violation_maps_to_duplicate_identifier(self):
        mock_cursor = MagicMock()
        mock_cursor.execute.side_effect = psycopg.errors.UniqueViolation("duplicate key")
        store = PostgresCredentialStore(dsn="mock://")
        profile = TouristProfile(first_name="Ana", last_name="Lopez", email="a@x.com")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            with pytest.raises(DuplicateIdentifier):
                store.insert(Role.TOURIST, profile, "$2b$10$hash")

    def test_connection_failure_maps_to_upstream_unavailable(self):
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", side_effect=psycopg.OperationalError("refused")):
            with pytest.raises(UpstreamUnavailable):
                store.find_by_identifier(Role.TOURIST, "a@x.com")

    def test_touch_last_seen_updates_role_table(self):
        mock_cursor = MagicMock()
        store = PostgresCredentialStore(dsn="mock://")

        with patch("psycopg.connect", return_value=_mock_connection(mock_cursor)):
            store.touch_last_seen(Role.BUSINESS_ADMIN, 20)

        sql, params = mock_cursor.execute.call_args[0]
        assert "UPDATE business_admins SET last_seen_at = NOW()" in sql
        assert params == (20,)
