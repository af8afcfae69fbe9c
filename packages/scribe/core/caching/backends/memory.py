"""In-process response cache with optional TTL."""

import time
from collections.abc import Callable

from scribe.core.caching.models import CacheKey


class MemoryResponseCache:
    """
    Dict-backed async cache for single-process deployments and tests.

    Expired entries are dropped lazily on read.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[bytes, float | None]] = {}

    async def get(self, key: CacheKey) -> bytes | None:
        entry = self._entries.get(str(key))
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(str(key), None)
            return None
        return value

    async def set(self, key: CacheKey, value: bytes, ttl_seconds: float | None = None) -> None:
        if ttl_seconds is None:
            ttl_seconds = self._ttl_seconds
        expires_at = self._clock() + ttl_seconds if ttl_seconds is not None else None
        self._entries[str(key)] = (bytes(value), expires_at)

    async def remove(self, key: CacheKey) -> None:
        self._entries.pop(str(key), None)

    async def close(self) -> None:
        self._entries.clear()

    def __contains__(self, key: CacheKey) -> bool:
        return str(key) in self._entries
