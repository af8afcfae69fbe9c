"""Protocol for distributed response cache backends (async-first)."""

from typing import Protocol

from .models import CacheKey


class ResponseCache(Protocol):
    """
    Generic key -> bytes cache for memoized responses.

    The cache engine only ever calls `remove` (when a post is deleted);
    populating and consulting the cache is up to the surrounding application.
    """

    async def get(self, key: CacheKey) -> bytes | None:
        """
        Fetch a cached value.

        Returns:
            Stored bytes, or None on miss/expiration
        """
        ...

    async def set(self, key: CacheKey, value: bytes, ttl_seconds: float | None = None) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Cache key
            value: Bytes to store
            ttl_seconds: Optional expiry; backend default when None
        """
        ...

    async def remove(self, key: CacheKey) -> None:
        """Remove a value (no-op when absent)."""
        ...
