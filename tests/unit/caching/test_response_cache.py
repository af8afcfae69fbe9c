"""Tests for response cache backends and typed model helpers."""

from __future__ import annotations

import logging

from pydantic import BaseModel
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from scribe.core.caching import (
    CacheKey,
    MemoryResponseCache,
    NullResponseCache,
    load_model,
    store_model,
)
from scribe.core.caching.backends.redis import RedisResponseCache


class SampleArtifact(BaseModel):
    """Sample artifact model for testing."""

    value: str
    schema_version: int = 1


class FakeRedis:
    """Minimal stand-in for a redis.asyncio client."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.expiry_ms: dict[str, int] = {}
        self.closed = False

    async def get(self, name: str) -> bytes | None:
        return self.data.get(name)

    async def set(self, name: str, value: bytes, px: int | None = None) -> None:
        self.data[name] = value
        if px is not None:
            self.expiry_ms[name] = px

    async def delete(self, name: str) -> int:
        return 1 if self.data.pop(name, None) is not None else 0

    async def aclose(self) -> None:
        self.closed = True


class UnreachableRedis:
    """redis.asyncio client stand-in whose server refuses connections."""

    async def get(self, name: str) -> bytes | None:
        raise RedisConnectionError("Error 111 connecting to 127.0.0.1:1")

    async def set(self, name: str, value: bytes, px: int | None = None) -> None:
        raise RedisConnectionError("Error 111 connecting to 127.0.0.1:1")

    async def delete(self, name: str) -> int:
        raise RedisConnectionError("Error 111 connecting to 127.0.0.1:1")


class BrokenCache:
    """Cache whose backend is unreachable."""

    async def get(self, key: CacheKey) -> bytes | None:
        raise ConnectionError("connection refused")

    async def set(self, key: CacheKey, value: bytes, ttl_seconds: float | None = None) -> None:
        raise ConnectionError("connection refused")

    async def remove(self, key: CacheKey) -> None:
        raise ConnectionError("connection refused")


class FakeMonotonic:
    def __init__(self) -> None:
        self.t = 100.0

    def __call__(self) -> float:
        return self.t


class TestCacheKey:
    """Tests for cache key rendering."""

    def test_renders_type_and_key(self):
        assert str(CacheKey(type_name="Post", key="42")) == "Post_42"

    def test_for_model_uses_class_name(self):
        assert str(CacheKey.for_model(SampleArtifact, "x")) == "SampleArtifact_x"


class TestNullResponseCache:
    """Tests for the no-op cache."""

    async def test_always_misses(self):
        cache = NullResponseCache()
        key = CacheKey(type_name="Post", key="1")
        await cache.set(key, b"data")
        assert await cache.get(key) is None
        await cache.remove(key)


class TestMemoryResponseCache:
    """Tests for the in-process cache."""

    async def test_set_get_remove(self):
        cache = MemoryResponseCache()
        key = CacheKey(type_name="Post", key="1")

        await cache.set(key, b"data")
        assert await cache.get(key) == b"data"
        assert key in cache

        await cache.remove(key)
        assert await cache.get(key) is None

    async def test_entries_expire(self):
        clock = FakeMonotonic()
        cache = MemoryResponseCache(ttl_seconds=10, clock=clock)
        key = CacheKey(type_name="Post", key="1")

        await cache.set(key, b"data")
        clock.t += 9
        assert await cache.get(key) == b"data"

        clock.t += 1
        assert await cache.get(key) is None
        assert key not in cache

    async def test_explicit_zero_ttl_is_not_the_default(self):
        clock = FakeMonotonic()
        cache = MemoryResponseCache(ttl_seconds=60, clock=clock)
        key = CacheKey(type_name="Post", key="1")

        await cache.set(key, b"data", ttl_seconds=0)

        assert await cache.get(key) is None


class TestRedisResponseCache:
    """Tests for the Redis backend against a fake client."""

    async def test_keys_are_prefixed_with_instance_name(self):
        client = FakeRedis()
        cache = RedisResponseCache(client, instance_name="blog1:")
        key = CacheKey(type_name="Post", key="1")

        await cache.set(key, b"data")

        assert client.data == {"blog1:Post_1": b"data"}
        assert await cache.get(key) == b"data"

    async def test_ttl_is_sent_in_milliseconds(self):
        client = FakeRedis()
        cache = RedisResponseCache(client, ttl_seconds=30)

        await cache.set(CacheKey(type_name="Post", key="1"), b"x")
        await cache.set(CacheKey(type_name="Post", key="2"), b"x", ttl_seconds=1.5)

        assert client.expiry_ms == {"Post_1": 30000, "Post_2": 1500}

    async def test_zero_ttl_drops_the_entry(self):
        client = FakeRedis()
        cache = RedisResponseCache(client, ttl_seconds=30)
        key = CacheKey(type_name="Post", key="1")
        await cache.set(key, b"old")

        await cache.set(key, b"new", ttl_seconds=0)

        assert client.data == {}

    async def test_client_errors_surface_as_connection_error(self):
        cache = RedisResponseCache(UnreachableRedis())
        key = CacheKey(type_name="Post", key="1")

        with pytest.raises(ConnectionError, match="Post_1"):
            await cache.get(key)
        with pytest.raises(ConnectionError):
            await cache.set(key, b"x")
        with pytest.raises(ConnectionError):
            await cache.remove(key)

    async def test_remove_and_close(self):
        client = FakeRedis()
        cache = RedisResponseCache(client)
        key = CacheKey(type_name="Post", key="1")
        await cache.set(key, b"x")

        await cache.remove(key)
        await cache.close()

        assert await cache.get(key) is None
        assert client.closed


class TestTypedHelpers:
    """Tests for load_model/store_model."""

    async def test_roundtrip(self):
        cache = MemoryResponseCache()
        await store_model(cache, "k", SampleArtifact(value="hello"))

        loaded = await load_model(cache, "k", SampleArtifact)

        assert loaded == SampleArtifact(value="hello")

    async def test_missing_entry_is_none(self):
        assert await load_model(MemoryResponseCache(), "k", SampleArtifact) is None

    async def test_corrupt_entry_is_a_miss(self, caplog: pytest.LogCaptureFixture):
        cache = MemoryResponseCache()
        await cache.set(CacheKey.for_model(SampleArtifact, "k"), b"not json")

        with caplog.at_level(logging.WARNING):
            assert await load_model(cache, "k", SampleArtifact) is None
        assert "corrupt" in caplog.text

    async def test_backend_failures_degrade(self):
        cache = BrokenCache()
        await store_model(cache, "k", SampleArtifact(value="x"))
        assert await load_model(cache, "k", SampleArtifact) is None

    async def test_unreachable_redis_degrades(self, caplog: pytest.LogCaptureFixture):
        cache = RedisResponseCache(UnreachableRedis(), instance_name="blog:")

        with caplog.at_level(logging.ERROR):
            await store_model(cache, "k", SampleArtifact(value="x"))
            assert await load_model(cache, "k", SampleArtifact) is None

        assert "blog:SampleArtifact_k" in caplog.text
