"""
Standardized error model with retry semantics.

Every error this service surfaces is terminal for the current operation.
The `retryable` flag only tells the caller whether trying again later can
succeed; nothing in the service retries on its own.
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Standardized service error.

    Attributes:
        code: Machine-readable error code.
        message_safe: Message safe for logs and API responses.
        message_debug: Optional detail for debugging, never returned to clients.
        retryable: Whether a later retry by the caller can succeed.
        http_status: Status code used when the error reaches the HTTP layer.
        cause: Optional underlying exception.
        debug_id: Short identifier for support correlation.
    """

    http_status: int = 500

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        cause: Exception | None = None,
        debug_id: str | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]
        if http_status is not None:
            self.http_status = http_status

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses.

        Returns:
            Dictionary with error details (excludes debug info).
        """
        return {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }


class ErrorCode:
    """Standard error codes."""

    # Authentication
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INACTIVE_ACCOUNT = "INACTIVE_ACCOUNT"
    UNAUTHENTICATED = "UNAUTHENTICATED"

    # Authorization
    FORBIDDEN = "FORBIDDEN"

    # Registration
    DUPLICATE_IDENTIFIER = "DUPLICATE_IDENTIFIER"

    # Storage
    CORRUPT_DIGEST = "CORRUPT_DIGEST"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
