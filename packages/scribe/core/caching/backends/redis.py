"""Redis-backed response cache (redis.asyncio)."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from scribe.core.caching.models import CacheKey

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _translate_errors(name: str) -> AsyncIterator[None]:
    # redis-py errors do not derive from the builtin ConnectionError
    try:
        yield
    except RedisError as e:
        raise ConnectionError(f"Redis operation failed for {name}: {e}") from e


class RedisResponseCache:
    """
    Distributed response cache on Redis.

    Keys are stored as "{instance_name}{type_name}_{key}" so several blogs can
    share one Redis database. Client failures surface as the builtin
    ConnectionError, which the typed helpers treat as a miss.

    Args:
        client: redis.asyncio client (tests pass a fake with the same methods)
        instance_name: Prefix for every key
        ttl_seconds: Default expiry applied by `set`
    """

    def __init__(
        self,
        client: Any,
        instance_name: str = "",
        ttl_seconds: float | None = None,
    ) -> None:
        self._client = client
        self._instance_name = instance_name
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_url(
        cls, url: str, instance_name: str = "", ttl_seconds: float | None = None
    ) -> "RedisResponseCache":
        """Create a cache with a client connected lazily to url."""
        return cls(aioredis.from_url(url), instance_name, ttl_seconds)

    def _name(self, key: CacheKey) -> str:
        return f"{self._instance_name}{key}"

    async def get(self, key: CacheKey) -> bytes | None:
        name = self._name(key)
        logger.debug(f"Cache get: {name}")
        async with _translate_errors(name):
            value = await self._client.get(name)
        if value is None:
            return None
        return bytes(value)

    async def set(self, key: CacheKey, value: bytes, ttl_seconds: float | None = None) -> None:
        name = self._name(key)
        if ttl_seconds is None:
            ttl_seconds = self._ttl_seconds
        logger.debug(f"Cache set: {name}")
        async with _translate_errors(name):
            if ttl_seconds is None:
                await self._client.set(name, value)
            elif ttl_seconds <= 0:
                # Already expired
                await self._client.delete(name)
            else:
                await self._client.set(name, value, px=max(1, int(ttl_seconds * 1000)))

    async def remove(self, key: CacheKey) -> None:
        name = self._name(key)
        logger.debug(f"Cache remove: {name}")
        async with _translate_errors(name):
            await self._client.delete(name)

    async def close(self) -> None:
        async with _translate_errors("client"):
            await self._client.aclose()
