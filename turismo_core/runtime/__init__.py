"""
Service runtime layer for the turismo service.

- ServiceError: Standardized errors carrying a code, an HTTP status and a retry flag
"""

from .errors import ErrorCode, ServiceError

__all__ = [
    "ErrorCode",
    "ServiceError",
]
