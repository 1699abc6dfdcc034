"""
Per-role login and registration.

Login checks run in a fixed order: existence, then status, then secret.
An unknown identifier and a wrong secret raise the same InvalidCredentials;
only a correct identifier with an inactive account raises InactiveAccount.
The last-seen update after a successful login is best-effort: its failure
is logged and never fails the login.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

from turismo_core.auth.credential_store import CredentialStore, Profile
from turismo_core.auth.exceptions import (
    AuthError,
    DuplicateIdentifier,
    InactiveAccount,
    InvalidCredentials,
    UpstreamUnavailable,
)
from turismo_core.auth.password_hasher import PasswordHasher
from turismo_core.auth.token_codec import TokenCodec
from turismo_core.domain.auth import (
    AccountStatus,
    BusinessAdminProfile,
    BusinessAdminRecord,
    PrincipalRecord,
    Role,
    SuperAdminProfile,
    SuperAdminRecord,
    TokenClaims,
    TouristProfile,
    TouristRecord,
)

# Schedules a callable to run after the response, e.g. BackgroundTasks.add_task
Deferrer = Callable[..., Any]


@dataclass(frozen=True)
class LoginResult:
    token: str
    profile: dict[str, Any]
    expires_in: int


def build_claims(record: PrincipalRecord) -> TokenClaims:
    """Role-specific claim set for a principal."""
    if isinstance(record, TouristRecord):
        return TokenClaims(principal_id=record.id, role=Role.TOURIST, identifier=record.email)
    if isinstance(record, BusinessAdminRecord):
        return TokenClaims(
            principal_id=record.id,
            role=Role.BUSINESS_ADMIN,
            identifier=record.email,
            business_id=record.business_id,
        )
    if isinstance(record, SuperAdminRecord):
        return TokenClaims(
            principal_id=record.id,
            role=Role.SUPER_ADMIN,
            identifier=record.username,
            access_level=record.access_level,
        )
    raise TypeError(f"Unknown principal record: {type(record).__name__}")


def public_profile(record: PrincipalRecord) -> dict[str, Any]:
    """Profile returned to the caller after login. Never includes the hash."""
    if isinstance(record, TouristRecord):
        return {
            "id": record.id,
            "first_name": record.first_name,
            "last_name": record.last_name,
            "email": record.email,
        }
    if isinstance(record, BusinessAdminRecord):
        return {
            "id": record.id,
            "first_name": record.first_name,
            "last_name": record.last_name,
            "email": record.email,
            "business_id": record.business_id,
            "business_name": record.business_name,
            "permissions": record.permissions,
        }
    if isinstance(record, SuperAdminRecord):
        return {
            "id": record.id,
            "username": record.username,
            "name": record.name,
            "email": record.email,
            "access_level": record.access_level,
            "permissions": record.permissions,
        }
    raise TypeError(f"Unknown principal record: {type(record).__name__}")


class Authenticator:
    """Orchestrates login and registration against the credential store."""

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, codec: TokenCodec):
        self.store = store
        self.hasher = hasher
        self.codec = codec

    def _call_store(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a store call, degrading unexpected faults to UpstreamUnavailable."""
        try:
            return fn(*args)
        except AuthError:
            raise
        except Exception as e:
            logger.error(f"Credential store {operation} failed: {e}")
            raise UpstreamUnavailable(message_debug=str(e), cause=e) from e

    def login(
        self,
        role: Role,
        identifier: str,
        secret: str,
        defer: Deferrer | None = None,
    ) -> LoginResult:
        """Authenticate a principal of the given role and mint a token.

        Args:
            role: Which principal table to authenticate against.
            identifier: Email, or username for super admins.
            secret: Plain text password.
            defer: Optional scheduler for the last-seen update.

        Returns:
            LoginResult with the bearer token and the public profile.

        Raises:
            InvalidCredentials: Unknown identifier or wrong secret.
            InactiveAccount: The account exists but is not active.
            CorruptDigest: The stored digest cannot be parsed.
            UpstreamUnavailable: The credential store failed.
        """
        role = Role(role)
        record = self._call_store("lookup", self.store.find_by_identifier, role, identifier)
        if record is None:
            logger.info(f"Login failed role={role.value}: unknown identifier")
            raise InvalidCredentials()

        if record.status != AccountStatus.ACTIVE:
            logger.info(f"Login refused role={role.value} id={record.id}: inactive account")
            raise InactiveAccount()

        if not self.hasher.verify(secret, record.password_hash):
            logger.info(f"Login failed role={role.value} id={record.id}: wrong secret")
            raise InvalidCredentials()

        token = self.codec.issue(build_claims(record))

        if defer is not None:
            defer(self.touch_last_seen, role, record.id)
        else:
            self.touch_last_seen(role, record.id)

        logger.info(f"Login ok role={role.value} id={record.id}")
        return LoginResult(
            token=token,
            profile=public_profile(record),
            expires_in=self.codec.ttl_seconds,
        )

    def touch_last_seen(self, role: Role, principal_id: int) -> None:
        """Record the last-seen timestamp. Failures are logged and swallowed."""
        try:
            self.store.touch_last_seen(role, principal_id)
        except Exception as e:
            logger.warning(f"Could not update last seen for {role.value} id={principal_id}: {e}")

    def _register(self, role: Role, profile: Profile, identifier: str, secret: str) -> int:
        existing = self._call_store("lookup", self.store.find_by_identifier, role, identifier)
        if existing is not None:
            raise DuplicateIdentifier()

        password_hash = self.hasher.hash(secret)
        # The insert can still hit the unique constraint if a concurrent
        # registration won the race; the store maps that to DuplicateIdentifier.
        new_id = self._call_store("insert", self.store.insert, role, profile, password_hash)
        logger.info(f"Registered {role.value} id={new_id}")
        return new_id

    def register_tourist(self, profile: TouristProfile, secret: str) -> int:
        """Self-service tourist registration.

        Returns:
            The new tourist's id.

        Raises:
            DuplicateIdentifier: The email is already registered.
            UpstreamUnavailable: The credential store failed.
        """
        return self._register(Role.TOURIST, profile, profile.email, secret)

    def create_business_admin(self, profile: BusinessAdminProfile, secret: str) -> int:
        """Create a business admin. Callers must already be admitted as super admin."""
        return self._register(Role.BUSINESS_ADMIN, profile, profile.email, secret)

    def create_super_admin(self, profile: SuperAdminProfile, secret: str) -> int:
        """Bootstrap a super admin. Used by the operator CLI only."""
        return self._register(Role.SUPER_ADMIN, profile, profile.username, secret)
