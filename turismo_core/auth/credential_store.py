"""
Credential store: persistence of principal records.

CredentialStore is the narrow contract the authenticator and the
re-validation cache depend on. PostgresCredentialStore implements it with
psycopg. Uniqueness of emails and usernames is enforced by the tables'
unique constraints; a violation surfaces as DuplicateIdentifier. Every other
driver failure surfaces as UpstreamUnavailable.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Iterator, Protocol, Union, runtime_checkable

import psycopg
from loguru import logger

from turismo_core.auth.exceptions import DuplicateIdentifier, UpstreamUnavailable
from turismo_core.config import settings
from turismo_core.domain.auth import (
    AccountStatus,
    BusinessAdminProfile,
    BusinessAdminRecord,
    PrincipalRecord,
    Role,
    SuperAdminProfile,
    SuperAdminRecord,
    TouristProfile,
    TouristRecord,
)

Profile = Union[TouristProfile, BusinessAdminProfile, SuperAdminProfile]


@runtime_checkable
class CredentialStore(Protocol):
    """Interface for principal lookup and persistence."""

    def find_by_identifier(self, role: Role, identifier: str) -> PrincipalRecord | None:
        """Look up a principal by email (tourist, business admin) or username (super admin)."""
        ...

    def find_by_id(self, role: Role, principal_id: int) -> PrincipalRecord | None:
        ...

    def insert(self, role: Role, profile: Profile, password_hash: str) -> int:
        """Insert an active principal and return its generated id.

        Raises:
            DuplicateIdentifier: On a unique constraint violation.
        """
        ...

    def touch_last_seen(self, role: Role, principal_id: int) -> None:
        ...


_TOURIST_COLUMNS = """
    id, email, password_hash, status, first_name, last_name,
    phone, origin_country, origin_city
"""

_BUSINESS_ADMIN_COLUMNS = """
    ba.id, ba.email, ba.password_hash, ba.status, ba.business_id,
    ba.first_name, ba.last_name, b.name, ba.permissions
"""

_SUPER_ADMIN_COLUMNS = """
    id, username, password_hash, status, name, access_level, email, permissions
"""

_TABLES = {
    Role.TOURIST: "tourists",
    Role.BUSINESS_ADMIN: "business_admins",
    Role.SUPER_ADMIN: "super_admins",
}


def _status(value: str) -> AccountStatus:
    """Stored status; anything other than a known value counts as inactive."""
    try:
        return AccountStatus(value)
    except ValueError:
        logger.warning(f"Unknown account status {value!r}, treating as inactive")
        return AccountStatus.INACTIVE


def _permissions(value: Any) -> dict | None:
    if value is None or isinstance(value, dict):
        return value
    return json.loads(value)


def _row_to_record(role: Role, row: tuple) -> PrincipalRecord:
    if role is Role.TOURIST:
        (id_, email, password_hash, status, first_name, last_name,
         phone, origin_country, origin_city) = row
        return TouristRecord(
            id=int(id_),
            email=email,
            password_hash=password_hash,
            status=_status(status),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            origin_country=origin_country,
            origin_city=origin_city,
        )
    if role is Role.BUSINESS_ADMIN:
        (id_, email, password_hash, status, business_id,
         first_name, last_name, business_name, permissions) = row
        return BusinessAdminRecord(
            id=int(id_),
            email=email,
            password_hash=password_hash,
            status=_status(status),
            business_id=int(business_id),
            first_name=first_name,
            last_name=last_name,
            business_name=business_name,
            permissions=_permissions(permissions),
        )
    if role is Role.SUPER_ADMIN:
        (id_, username, password_hash, status, name, access_level, email, permissions) = row
        return SuperAdminRecord(
            id=int(id_),
            username=username,
            password_hash=password_hash,
            status=_status(status),
            name=name,
            access_level=access_level,
            email=email,
            permissions=_permissions(permissions),
        )
    raise ValueError(f"Unknown role: {role!r}")


class PostgresCredentialStore:
    """CredentialStore backed by PostgreSQL."""

    def __init__(self, dsn: str | None = None):
        """Initialize the store.

        Args:
            dsn: PostgreSQL connection string. Defaults to settings.POSTGRES_DSN.
        """
        self.dsn = dsn or settings.POSTGRES_DSN

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor]:
        try:
            with psycopg.connect(self.dsn) as conn:
                with conn.cursor() as cur:
                    yield cur
                    conn.commit()
        except psycopg.errors.UniqueViolation as e:
            raise DuplicateIdentifier(message_debug=str(e), cause=e) from e
        except psycopg.Error as e:
            logger.error(f"Credential store error: {e}")
            raise UpstreamUnavailable(message_debug=str(e), cause=e) from e

    def _select(self, role: Role, where: str) -> str:
        if role is Role.TOURIST:
            return f"SELECT {_TOURIST_COLUMNS} FROM tourists WHERE {where}"
        if role is Role.BUSINESS_ADMIN:
            return (
                f"SELECT {_BUSINESS_ADMIN_COLUMNS} FROM business_admins ba "
                f"JOIN businesses b ON ba.business_id = b.id WHERE ba.{where}"
            )
        if role is Role.SUPER_ADMIN:
            return f"SELECT {_SUPER_ADMIN_COLUMNS} FROM super_admins WHERE {where}"
        raise ValueError(f"Unknown role: {role!r}")

    def find_by_identifier(self, role: Role, identifier: str) -> PrincipalRecord | None:
        column = "username" if role is Role.SUPER_ADMIN else "email"
        with self._cursor() as cur:
            cur.execute(self._select(role, f"{column} = %s"), (identifier,))
            row = cur.fetchone()
        return _row_to_record(role, row) if row else None

    def find_by_id(self, role: Role, principal_id: int) -> PrincipalRecord | None:
        with self._cursor() as cur:
            cur.execute(self._select(role, "id = %s"), (principal_id,))
            row = cur.fetchone()
        return _row_to_record(role, row) if row else None

    def insert(self, role: Role, profile: Profile, password_hash: str) -> int:
        if role is Role.TOURIST and isinstance(profile, TouristProfile):
            sql = """
                INSERT INTO tourists
                    (first_name, last_name, email, password_hash, phone,
                     origin_country, origin_city, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id
            """
            params = (
                profile.first_name, profile.last_name, profile.email, password_hash,
                profile.phone, profile.origin_country, profile.origin_city,
                AccountStatus.ACTIVE.value,
            )
        elif role is Role.BUSINESS_ADMIN and isinstance(profile, BusinessAdminProfile):
            sql = """
                INSERT INTO business_admins
                    (business_id, first_name, last_name, email, password_hash,
                     phone, position, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id
            """
            params = (
                profile.business_id, profile.first_name, profile.last_name, profile.email,
                password_hash, profile.phone, profile.position, AccountStatus.ACTIVE.value,
            )
        elif role is Role.SUPER_ADMIN and isinstance(profile, SuperAdminProfile):
            sql = """
                INSERT INTO super_admins
                    (username, name, email, password_hash, access_level, status)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING id
            """
            params = (
                profile.username, profile.name, profile.email, password_hash,
                profile.access_level, AccountStatus.ACTIVE.value,
            )
        else:
            raise ValueError(f"Profile {type(profile).__name__} does not match role {role.value}")

        with self._cursor() as cur:
            cur.execute(sql, params)
            new_id = cur.fetchone()[0]
        return int(new_id)

    def touch_last_seen(self, role: Role, principal_id: int) -> None:
        with self._cursor() as cur:
            cur.execute(
                f"UPDATE {_TABLES[role]} SET last_seen_at = NOW() WHERE id = %s",
                (principal_id,),
            )
