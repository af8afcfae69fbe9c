"""No-op response cache.

Always reports a miss, discards all stores.
"""

from scribe.core.caching.models import CacheKey


class NullResponseCache:
    """No-op async cache used when no distributed cache is configured."""

    async def get(self, key: CacheKey) -> bytes | None:
        """Always returns None."""
        return None

    async def set(self, key: CacheKey, value: bytes, ttl_seconds: float | None = None) -> None:
        """Discard."""

    async def remove(self, key: CacheKey) -> None:
        """No-op."""

    async def close(self) -> None:
        """No-op."""
