"""
FastAPI dependencies for authentication and authorization.

Provides dependency injection for:
- Building the auth services from settings
- Admitting requests by role (require_roles)
- Business ownership checks (require_business_access)
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, Request

from turismo_core.auth.access_guard import AccessGuard
from turismo_core.auth.authenticator import Authenticator
from turismo_core.auth.credential_store import CredentialStore, PostgresCredentialStore
from turismo_core.auth.ownership import check_ownership
from turismo_core.auth.password_hasher import PasswordHasher
from turismo_core.auth.revalidation import PrincipalRevalidator, StatusCache
from turismo_core.auth.token_codec import TokenCodec
from turismo_core.config import settings
from turismo_core.domain.auth import AllowedRoles, AuthContext, Role


# =============================================================================
# Service Factories
# =============================================================================


def get_token_codec() -> TokenCodec:
    return TokenCodec(secret=settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def get_credential_store() -> CredentialStore:
    return PostgresCredentialStore()


def get_access_guard(codec: TokenCodec = Depends(get_token_codec)) -> AccessGuard:
    return AccessGuard(codec)


def get_authenticator(
    store: CredentialStore = Depends(get_credential_store),
    codec: TokenCodec = Depends(get_token_codec),
) -> Authenticator:
    return Authenticator(store=store, hasher=PasswordHasher(settings.BCRYPT_ROUNDS), codec=codec)


@lru_cache(maxsize=1)
def get_status_cache() -> StatusCache:
    """Process-wide status cache so revalidation answers outlive a single request."""
    return StatusCache()


def get_revalidator(
    store: CredentialStore = Depends(get_credential_store),
) -> PrincipalRevalidator:
    return PrincipalRevalidator(
        store,
        ttl_seconds=settings.REVALIDATION_TTL_SECONDS,
        cache=get_status_cache(),
    )


# =============================================================================
# Admission
# =============================================================================


def get_auth_context(request: Request) -> AuthContext:
    """Get the auth context bound by a require_roles dependency.

    Raises:
        HTTPException: 401 if no principal was bound to this request.
    """
    auth = getattr(request.state, "auth", None)
    if not auth:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


def _admit(request: Request, guard: AccessGuard, allowed: AllowedRoles) -> AuthContext:
    auth = guard.authorize(
        request.headers.get("Authorization"),
        allowed,
        request_id=request.headers.get("X-Request-Id"),
    )
    request.state.auth = auth
    return auth


def require_roles(*roles: Role | str, revalidate: bool = False):
    """Dependency factory admitting only the given roles.

    With no roles, any authenticated principal is admitted. With
    revalidate=True the principal's current status is also checked
    against the credential store (through a short TTL cache).

    Usage:
        @router.post("/businesses")
        async def create(auth: AuthContext = Depends(require_roles(Role.SUPER_ADMIN))):
            ...
    """
    allowed = AllowedRoles.of(*roles) if roles else AllowedRoles.any()

    if revalidate:

        def _check_live(
            request: Request,
            guard: AccessGuard = Depends(get_access_guard),
            revalidator: PrincipalRevalidator = Depends(get_revalidator),
        ) -> AuthContext:
            return revalidator.revalidate(_admit(request, guard, allowed))

        return _check_live

    def _check(request: Request, guard: AccessGuard = Depends(get_access_guard)) -> AuthContext:
        return _admit(request, guard, allowed)

    return _check


require_authenticated = require_roles()
require_tourist = require_roles(Role.TOURIST)
require_business_admin = require_roles(Role.BUSINESS_ADMIN)
require_super_admin = require_roles(Role.SUPER_ADMIN)


def require_business_access(
    business_id: int,
    auth: AuthContext = Depends(require_roles(Role.BUSINESS_ADMIN, Role.SUPER_ADMIN)),
) -> AuthContext:
    """Admit business admins of `business_id` (path parameter) and super admins."""
    check_ownership(auth, business_id)
    return auth
