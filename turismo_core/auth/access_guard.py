"""
Request admission gate.

The guard trusts the token signature and never reads the credential store,
so a principal deactivated after login keeps a working token until it
expires. Operations that need a live status check opt into
PrincipalRevalidator (see turismo_core.auth.revalidation).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from loguru import logger

from turismo_core.auth.exceptions import Forbidden, TokenError, Unauthenticated
from turismo_core.auth.token_codec import TokenCodec
from turismo_core.domain.auth import AllowedRoles, AuthContext

BEARER_PREFIX = "Bearer "


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` value.

    Raises:
        Unauthenticated: Missing header, another scheme, or an empty token.
    """
    if not authorization:
        raise Unauthenticated("Token not provided")
    if not authorization.startswith(BEARER_PREFIX):
        raise Unauthenticated("Token not provided")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthenticated("Token not provided")
    return token


class AccessGuard:
    """Verifies bearer tokens and checks the caller's role."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def authorize(
        self,
        authorization: str | None,
        allowed: AllowedRoles,
        request_id: str | None = None,
        now: datetime | None = None,
    ) -> AuthContext:
        """Admit or reject one operation.

        Args:
            authorization: Raw Authorization header value.
            allowed: Roles the operation admits.
            request_id: Correlation id; generated when absent.
            now: Verification time; defaults to the current UTC time.

        Returns:
            AuthContext binding the decoded claims to the request. The bound
            principal is `claims`, which is the same for every call on one
            token; `request_id` and `authenticated_at` describe the call.

        Raises:
            Unauthenticated: No token, or verification failed for any reason.
            Forbidden: The token's role is not admitted.
        """
        request_id = request_id or str(uuid.uuid4())
        token = parse_bearer(authorization)

        try:
            claims = self.codec.verify(token, now=now)
        except TokenError as e:
            logger.debug(f"[{request_id}] Token rejected: {type(e).__name__}")
            raise Unauthenticated("Invalid token", cause=e) from e

        if not allowed.admits(claims.role):
            logger.warning(
                f"[{request_id}] Role {claims.role.value} not admitted "
                f"(principal id={claims.principal_id})"
            )
            raise Forbidden()

        return AuthContext(
            claims=claims,
            authenticated_at=now or datetime.now(timezone.utc),
            request_id=request_id,
        )
