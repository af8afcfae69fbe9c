"""Scribe session coordinator.

The session is the composition root: it turns an AppConfig into the object
stores, response cache, cache engine and blog façade, and owns their
lifecycle (initialize on start, flush snapshots and close connections on
close).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from scribe.core.blog import BlogService, PostCacheEngine
from scribe.core.caching import MemoryResponseCache, NullResponseCache, ResponseCache
from scribe.core.config.models import AppConfig
from scribe.core.io import RealFileSystem, absolute_path
from scribe.core.storage import FSObjectStore, MemoryObjectStore, ObjectStore

logger = logging.getLogger(__name__)


class ScribeSession:
    """Owns the services of one running blog.

    Services are created lazily on first access; tests can inject any of the
    stores or the response cache instead.

    Example:
        async with ScribeSession(app_config="config.yaml") as session:
            page = await session.blog.list_posts_paged(1)
    """

    def __init__(
        self,
        *,
        app_config: AppConfig | Path | str | None = None,
        posts_store: ObjectStore | None = None,
        files_store: ObjectStore | None = None,
        response_cache: ResponseCache | None = None,
    ):
        """Initialize session with config.

        Args:
            app_config: AppConfig instance, path, or None (uses default path)
            posts_store: Store for post records (built from config when None)
            files_store: Store for uploaded files (built from config when None)
            response_cache: Response cache (built from config when None)

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
            ValidationError: If config is invalid
        """
        self.app_config: AppConfig = self._resolve_config(app_config)
        if posts_store is not None:
            self._posts_store = posts_store
        if files_store is not None:
            self._files_store = files_store
        if response_cache is not None:
            self._response_cache = response_cache

        storage = self.app_config.storage
        logger.debug(f"Session configured: storage={storage.backend}, root={storage.root_dir}")

    @staticmethod
    def _resolve_config(value: Any) -> AppConfig:
        if value is None:
            return AppConfig.load_or_default()
        elif isinstance(value, (Path, str)):
            return AppConfig.load_or_default(Path(value))
        elif isinstance(value, AppConfig):
            return value
        else:
            raise TypeError(f"Expected AppConfig, Path, str, or None; got {type(value).__name__}")

    def _build_store(self, container: str, base_url: str | None = None) -> ObjectStore:
        storage = self.app_config.storage
        if storage.backend == "memory":
            return MemoryObjectStore(container)

        root = absolute_path(Path(storage.root_dir).expanduser().resolve() / container)
        return FSObjectStore(RealFileSystem(), root, base_url)

    @property
    def posts_store(self) -> ObjectStore:
        if not hasattr(self, "_posts_store"):
            self._posts_store = self._build_store(self.app_config.storage.posts_container)
        return self._posts_store

    @property
    def files_store(self) -> ObjectStore:
        if not hasattr(self, "_files_store"):
            storage = self.app_config.storage
            self._files_store = self._build_store(storage.files_container, storage.base_url)
        return self._files_store

    @property
    def response_cache(self) -> ResponseCache:
        if not hasattr(self, "_response_cache"):
            settings = self.app_config.response_cache
            cache: ResponseCache
            if settings.backend == "redis":
                # Imported here so the redis client is only loaded when configured
                from scribe.core.caching.backends.redis import RedisResponseCache

                cache = RedisResponseCache.from_url(
                    settings.redis_url, settings.instance_name, settings.ttl_seconds
                )
            elif settings.backend == "memory":
                cache = MemoryResponseCache(ttl_seconds=settings.ttl_seconds)
            else:
                cache = NullResponseCache()
            self._response_cache = cache
        return self._response_cache

    @property
    def engine(self) -> PostCacheEngine:
        if not hasattr(self, "_engine"):
            storage = self.app_config.storage
            self._engine = PostCacheEngine(
                self.posts_store,
                self.files_store,
                self.response_cache,
                list_page_size=storage.list_page_size,
                rebuild_on_startup=storage.rebuild_on_startup,
            )
        return self._engine

    @property
    def blog(self) -> BlogService:
        if not hasattr(self, "_blog"):
            self._blog = BlogService(self.engine, self.app_config.blog)
        return self._blog

    async def start(self) -> None:
        """Initialize the engine (loads or rebuilds the indices)."""
        await self.engine.initialize()

    async def close(self) -> None:
        """Persist pending index changes and release the response cache."""
        try:
            if hasattr(self, "_engine") and self._engine.is_initialized:
                await self._engine.flush()
        finally:
            if hasattr(self, "_response_cache"):
                close = getattr(self._response_cache, "close", None)
                if close is not None:
                    await close()

    async def __aenter__(self) -> ScribeSession:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
