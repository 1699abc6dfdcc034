"""
Optional live status check for bound principals.

Sits in front of the credential store with a short TTL cache so sensitive
operations can reject tokens of deleted or deactivated accounts without a
store round trip on every request.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from loguru import logger

from turismo_core.auth.credential_store import CredentialStore
from turismo_core.auth.exceptions import AuthError, Unauthenticated, UpstreamUnavailable
from turismo_core.domain.auth import AccountStatus, AuthContext, Role

CacheKey = tuple[Role, int]


class StatusCache:
    """Thread-safe map of (role, id) to an active flag with per-entry expiry.

    Expired entries are dropped when read, and every write sweeps the
    remaining expired entries, so the map only holds principals seen within
    the last TTL.
    """

    def __init__(self):
        self._entries: dict[CacheKey, tuple[bool, float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: CacheKey, now: float) -> bool | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry[1] <= now:
                del self._entries[key]
                return None
            return entry[0]

    def put(self, key: CacheKey, active: bool, expires_at: float, now: float) -> None:
        with self._lock:
            expired = [k for k, (_, exp) in self._entries.items() if exp <= now]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (active, expires_at)

    def pop(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key, None)


class PrincipalRevalidator:
    """Checks that a bound principal still exists and is active."""

    def __init__(
        self,
        store: CredentialStore,
        ttl_seconds: float = 30,
        clock: Callable[[], float] = time.monotonic,
        cache: StatusCache | None = None,
    ):
        """Initialize the revalidator.

        Args:
            store: Credential store to consult on a cache miss.
            ttl_seconds: How long an answer is reused.
            clock: Monotonic clock, injectable for tests.
            cache: Shared status cache; a private one is created when omitted.
        """
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.cache = cache if cache is not None else StatusCache()

    def _is_active(self, role: Role, principal_id: int) -> bool:
        key = (role, principal_id)
        now = self._clock()
        cached = self.cache.get(key, now)
        if cached is not None:
            return cached

        try:
            record = self.store.find_by_id(role, principal_id)
        except AuthError:
            raise
        except Exception as e:
            logger.error(f"Revalidation lookup failed for {role.value} id={principal_id}: {e}")
            raise UpstreamUnavailable(message_debug=str(e), cause=e) from e

        active = record is not None and record.status == AccountStatus.ACTIVE
        self.cache.put(key, active, now + self.ttl_seconds, now)
        return active

    def revalidate(self, context: AuthContext) -> AuthContext:
        """Return the context unchanged, or raise Unauthenticated.

        Raises:
            Unauthenticated: The principal was deleted or deactivated.
            UpstreamUnavailable: The credential store failed.
        """
        if not self._is_active(context.role, context.principal_id):
            logger.warning(
                f"[{context.request_id}] Token for inactive or missing "
                f"{context.role.value} id={context.principal_id}"
            )
            raise Unauthenticated("Account is no longer active")
        return context

    def invalidate(self, role: Role, principal_id: int) -> None:
        self.cache.pop((role, principal_id))
