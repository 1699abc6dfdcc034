"""
Auth-specific exceptions.

The login path distinguishes InvalidCredentials from InactiveAccount; the
HTTP layer decides how much of that distinction to reveal. Token-level
failures (TokenError and subclasses) never leave the access guard: it
collapses them into Unauthenticated.
"""

from __future__ import annotations

from turismo_core.runtime.errors import ErrorCode, ServiceError


class AuthError(ServiceError):
    """Base authentication/authorization error."""

    code: str = ErrorCode.UNAUTHENTICATED
    default_message: str = "Authentication failed"
    retryable: bool = False
    http_status: int = 401

    def __init__(
        self,
        message: str | None = None,
        *,
        message_debug: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            code=type(self).code,
            message_safe=message or self.default_message,
            message_debug=message_debug,
            retryable=type(self).retryable,
            cause=cause,
        )


class InvalidCredentials(AuthError):
    """Unknown identifier or wrong secret. The two are indistinguishable."""

    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class InactiveAccount(AuthError):
    """Correct identifier but the account status is not active."""

    code = ErrorCode.INACTIVE_ACCOUNT
    default_message = "Account is inactive"


class DuplicateIdentifier(AuthError):
    """The email or username is already registered."""

    code = ErrorCode.DUPLICATE_IDENTIFIER
    default_message = "Identifier is already registered"
    http_status = 409


class Unauthenticated(AuthError):
    """No bearer token, or a token that failed verification."""

    code = ErrorCode.UNAUTHENTICATED
    default_message = "Authentication required"


class Forbidden(AuthError):
    """Authenticated, but the role or business scope does not allow it."""

    code = ErrorCode.FORBIDDEN
    default_message = "Access denied"
    http_status = 403


class CorruptDigest(AuthError):
    """A stored password digest could not be parsed."""

    code = ErrorCode.CORRUPT_DIGEST
    default_message = "Stored credential is unreadable"
    http_status = 500


class UpstreamUnavailable(AuthError):
    """The credential store failed or could not be reached."""

    code = ErrorCode.UPSTREAM_UNAVAILABLE
    default_message = "Credential store unavailable"
    retryable = True
    http_status = 503


class TokenError(AuthError):
    """Base for bearer token verification failures."""

    default_message = "Invalid token"


class TokenMalformed(TokenError):
    default_message = "Token could not be parsed"


class TokenSignatureInvalid(TokenError):
    default_message = "Token signature mismatch"


class TokenExpired(TokenError):
    default_message = "Token has expired"
