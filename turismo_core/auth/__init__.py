"""
Auth module for the turismo service.

Provides password hashing, bearer tokens, per-role login and registration,
request admission by role, and the business ownership rule.
"""

from turismo_core.auth.access_guard import AccessGuard, parse_bearer
from turismo_core.auth.authenticator import Authenticator, LoginResult
from turismo_core.auth.credential_store import CredentialStore, PostgresCredentialStore
from turismo_core.auth.ownership import check_ownership, owns_business
from turismo_core.auth.password_hasher import PasswordHasher
from turismo_core.auth.revalidation import PrincipalRevalidator, StatusCache
from turismo_core.auth.token_codec import TOKEN_TTL, TokenCodec
from turismo_core.auth.dependencies import (
    get_auth_context,
    require_authenticated,
    require_business_access,
    require_business_admin,
    require_roles,
    require_super_admin,
    require_tourist,
)

__all__ = [
    "AccessGuard",
    "Authenticator",
    "CredentialStore",
    "LoginResult",
    "PasswordHasher",
    "PostgresCredentialStore",
    "PrincipalRevalidator",
    "StatusCache",
    "TOKEN_TTL",
    "TokenCodec",
    "check_ownership",
    "get_auth_context",
    "owns_business",
    "parse_bearer",
    "require_authenticated",
    "require_business_access",
    "require_business_admin",
    "require_roles",
    "require_super_admin",
    "require_tourist",
]
