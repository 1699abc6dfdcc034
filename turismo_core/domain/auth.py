"""
Authentication and authorization domain models.

This module defines the core data structures for auth:
- Role: the closed set of principal kinds
- Principal records: one frozen dataclass per role (a tagged union)
- TokenClaims: the signed claim set carried by a bearer token
- AuthContext: the principal bound to one in-flight request
- AllowedRoles: which roles an operation admits
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union


class Role(str, Enum):
    """Principal kinds. Also the `role` claim carried in tokens."""

    TOURIST = "tourist"
    BUSINESS_ADMIN = "business_admin"
    SUPER_ADMIN = "super_admin"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class TouristRecord:
    id: int
    email: str
    password_hash: str
    status: AccountStatus
    first_name: str
    last_name: str
    phone: str | None = None
    origin_country: str | None = None
    origin_city: str | None = None

    @property
    def role(self) -> Role:
        return Role.TOURIST

    @property
    def identifier(self) -> str:
        return self.email


@dataclass(frozen=True)
class BusinessAdminRecord:
    id: int
    email: str
    password_hash: str
    status: AccountStatus
    business_id: int
    first_name: str
    last_name: str
    business_name: str | None = None
    permissions: dict | None = None

    @property
    def role(self) -> Role:
        return Role.BUSINESS_ADMIN

    @property
    def identifier(self) -> str:
        return self.email


@dataclass(frozen=True)
class SuperAdminRecord:
    id: int
    username: str
    password_hash: str
    status: AccountStatus
    name: str
    access_level: str
    email: str | None = None
    permissions: dict | None = None

    @property
    def role(self) -> Role:
        return Role.SUPER_ADMIN

    @property
    def identifier(self) -> str:
        return self.username


PrincipalRecord = Union[TouristRecord, BusinessAdminRecord, SuperAdminRecord]


@dataclass(frozen=True)
class TouristProfile:
    """Self-service registration input for a tourist."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    origin_country: str | None = None
    origin_city: str | None = None


@dataclass(frozen=True)
class BusinessAdminProfile:
    """Input for creating a business admin bound to one business."""

    business_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    position: str | None = None


@dataclass(frozen=True)
class SuperAdminProfile:
    """Input for bootstrapping a super admin from the operator CLI."""

    username: str
    name: str
    access_level: str
    email: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Claim set signed into a bearer token.

    `business_id` is set only for business admins and `access_level` only
    for super admins. Both are fixed at signing time.
    """

    principal_id: int
    role: Role
    identifier: str
    business_id: int | None = None
    access_level: str | None = None
    issued_at: datetime | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class AuthContext:
    """Request-scoped authentication context.

    Attached to request.state.auth by the access guard dependencies.
    `claims` identifies the principal; the other fields belong to the request.
    """

    claims: TokenClaims
    authenticated_at: datetime
    request_id: str

    @property
    def principal_id(self) -> int:
        return self.claims.principal_id

    @property
    def role(self) -> Role:
        return self.claims.role

    @property
    def business_id(self) -> int | None:
        return self.claims.business_id


@dataclass(frozen=True)
class AllowedRoles:
    """Roles an operation admits.

    Use AllowedRoles.any() for "any authenticated principal". An explicit
    role set can never be empty, so there is no way to build a deny-all gate
    by accident.
    """

    roles: frozenset[Role] = field(default_factory=frozenset)
    any_role: bool = False

    @classmethod
    def any(cls) -> "AllowedRoles":
        return cls(any_role=True)

    @classmethod
    def of(cls, *roles: Role | str) -> "AllowedRoles":
        if not roles:
            raise ValueError("AllowedRoles.of() needs at least one role; use AllowedRoles.any()")
        return cls(roles=frozenset(Role(r) for r in roles))

    @classmethod
    def from_list(cls, roles: list[Role | str] | None) -> "AllowedRoles":
        """Legacy list form: an empty or missing list means any role."""
        if not roles:
            return cls.any()
        return cls.of(*roles)

    def admits(self, role: Role) -> bool:
        return self.any_role or role in self.roles
