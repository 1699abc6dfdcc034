"""
Rate limiter infrastructure using slowapi.
"""

from slowapi import Limiter, _rate_limit_exceeded_handler  # noqa: F401
from slowapi.util import get_remote_address

from turismo_core.config import settings

# Memory storage only limits per process; point RATE_LIMIT_STORAGE_URI at
# Redis when running several workers.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)
