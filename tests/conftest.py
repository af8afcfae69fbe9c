"""Shared pytest fixtures for scribe tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from scribe.core.blog import BlogService, PostCacheEngine
from scribe.core.caching import MemoryResponseCache
from scribe.core.config import BlogSettings
from scribe.core.storage import MemoryObjectStore

# ============================================================================
# Clock Fixtures
# ============================================================================

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


class FixedClock:
    """Settable clock for time-dependent behavior."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-01-15 12:00 UTC."""
    return FixedClock()


# ============================================================================
# Storage / Engine Fixtures
# ============================================================================


@pytest.fixture
def posts_store() -> MemoryObjectStore:
    return MemoryObjectStore("posts")


@pytest.fixture
def files_store() -> MemoryObjectStore:
    return MemoryObjectStore("files")


@pytest.fixture
def response_cache() -> MemoryResponseCache:
    return MemoryResponseCache()


@pytest.fixture
def engine(
    posts_store: MemoryObjectStore,
    files_store: MemoryObjectStore,
    response_cache: MemoryResponseCache,
    clock: FixedClock,
) -> PostCacheEngine:
    """Uninitialized engine over empty in-memory stores."""
    return PostCacheEngine(posts_store, files_store, response_cache, clock=clock)


@pytest.fixture
async def ready_engine(engine: PostCacheEngine) -> PostCacheEngine:
    """Initialized engine over empty in-memory stores."""
    await engine.initialize()
    return engine


@pytest.fixture
def blog(ready_engine: PostCacheEngine) -> BlogService:
    return BlogService(ready_engine, BlogSettings(posts_per_page=2, comments_close_after_days=7))
