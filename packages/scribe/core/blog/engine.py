"""Post and category cache engine.

Mirrors the post records of an object store into two in-memory indices:

- summary index: post id -> PostSummary (no body, no comments)
- category index: label -> Category (member post ids)

Both indices are persisted as snapshot blobs next to the records so a restart
can skip the full scan. The `post-{id}.json` records stay the source of truth;
snapshots can be rebuilt from them at any time.

Concurrency model: one engine per event loop. Index entries are only mutated
between awaits, and a rebuild swaps the whole map in one assignment, so
readers never observe a partial update. Each index has its own lock that
serializes its writers (and its snapshot writes); readers take no lock.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from types import MappingProxyType

from scribe.core.blog.codec import (
    decode_post,
    decode_summary_index,
    encode_category_index,
    encode_post,
    encode_summary_index,
)
from scribe.core.blog.errors import EngineNotInitializedError
from scribe.core.blog.models import Category, Post, PostSummary, utc_now
from scribe.core.blog.paging import PagedResult, page_slice
from scribe.core.blog.slugs import sanitize_file_component, timestamp_suffix
from scribe.core.caching import CacheKey, NullResponseCache, ResponseCache
from scribe.core.storage import (
    DEFAULT_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    ObjectNotFoundError,
    ObjectStore,
    validate_key,
)

logger = logging.getLogger(__name__)

POST_KEY_PREFIX = "post-"
POST_KEY_SUFFIX = ".json"
SUMMARY_SNAPSHOT_KEY = "summary-cache.json"
CATEGORY_SNAPSHOT_KEY = "category-cache.json"
DEFAULT_LIST_PAGE_SIZE = 20


def post_key(post_id: str) -> str:
    """Object key of a post record."""
    return f"{POST_KEY_PREFIX}{post_id}{POST_KEY_SUFFIX}"


class PostCacheEngine:
    """
    Cache-first storage engine for posts and categories.

    Args:
        posts: Store holding post records and index snapshots
        files: Store holding uploaded files
        response_cache: Optional memoized-response cache, invalidated on save and delete
        list_page_size: Keys fetched per listing round during a rebuild
        rebuild_on_startup: Ignore an existing summary snapshot in initialize()
        clock: Source of "now" (aware UTC datetimes)
    """

    def __init__(
        self,
        posts: ObjectStore,
        files: ObjectStore,
        response_cache: ResponseCache | None = None,
        *,
        list_page_size: int = DEFAULT_LIST_PAGE_SIZE,
        rebuild_on_startup: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._posts = posts
        self._files = files
        self._response_cache = response_cache if response_cache is not None else NullResponseCache()
        self._list_page_size = list_page_size
        self._rebuild_on_startup = rebuild_on_startup
        self._clock = clock

        self._summaries: dict[str, PostSummary] = {}
        self._categories: dict[str, Category] = {}
        self._summary_dirty = False
        self._rebuild_generation = 0

        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._summary_lock = asyncio.Lock()
        self._category_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def response_cache(self) -> ResponseCache:
        return self._response_cache

    @property
    def summaries(self) -> Mapping[str, PostSummary]:
        """Read-only view of the current summary index."""
        return MappingProxyType(self._summaries)

    @property
    def categories(self) -> Mapping[str, Category]:
        """Read-only view of the current category index."""
        return MappingProxyType(self._categories)

    async def initialize(self) -> None:
        """
        Prepare storage and load the indices.

        Safe to call multiple times; only the first call does any work.
        Callers should await this before serving traffic.
        """
        async with self._init_lock:
            if self._initialized:
                return

            await self._posts.ensure_container(public=False)
            await self._files.ensure_container(public=True)

            await self._load_summary_index(force=self._rebuild_on_startup)
            await self._rebuild_category_index()

            self._initialized = True
            logger.info(
                f"Post cache initialized: {len(self._summaries)} posts, "
                f"{len(self._categories)} categories"
            )

    async def flush(self) -> None:
        """Persist the summary snapshot if saves or deletes changed the index."""
        async with self._summary_lock:
            if not self._summary_dirty:
                return
            await self._posts.write(
                SUMMARY_SNAPSHOT_KEY, encode_summary_index(self._summaries), JSON_CONTENT_TYPE
            )
            self._summary_dirty = False
            logger.debug(f"Flushed summary snapshot ({len(self._summaries)} posts)")

    async def rebuild_indices(self) -> None:
        """Rebuild both indices from the post records."""
        self._require_initialized()
        await self._rebuild_summary_index()
        await self._rebuild_category_index()

    def now(self) -> datetime:
        """Current time according to the engine clock."""
        return self._clock()

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise EngineNotInitializedError("PostCacheEngine.initialize() has not completed")

    # ------------------------------------------------------------------
    # Summary index
    # ------------------------------------------------------------------

    async def _load_summary_index(self, force: bool = False) -> None:
        if not force and await self._posts.exists(SUMMARY_SNAPSHOT_KEY):
            data = await self._posts.read(SUMMARY_SNAPSHOT_KEY)
            index = decode_summary_index(data, key=SUMMARY_SNAPSHOT_KEY)
            async with self._summary_lock:
                self._summaries = index
                self._summary_dirty = False
            logger.debug(f"Loaded summary snapshot ({len(index)} posts)")
            return

        await self._rebuild_summary_index()

    async def _rebuild_summary_index(self) -> None:
        """Scan every post record and replace the summary index and its snapshot.

        Holds the summary lock for the whole scan so upserts from concurrent
        saves are applied to the new map, after the swap.
        """
        async with self._summary_lock:
            fresh: dict[str, PostSummary] = {}
            continuation: str | None = None
            rounds = 0

            while True:
                page = await self._posts.list_keys(
                    POST_KEY_PREFIX, self._list_page_size, continuation
                )
                rounds += 1
                for key in page.keys:
                    if not key.endswith(POST_KEY_SUFFIX):
                        continue
                    try:
                        data = await self._posts.read(key)
                    except ObjectNotFoundError:
                        # Deleted after it was listed
                        continue
                    post = decode_post(data, key=key)
                    fresh[post.id] = post.summary()

                continuation = page.continuation
                if continuation is None:
                    break

            await self._posts.write(
                SUMMARY_SNAPSHOT_KEY, encode_summary_index(fresh), JSON_CONTENT_TYPE
            )
            self._summaries = fresh
            self._summary_dirty = False
            self._rebuild_generation += 1

        logger.info(f"Rebuilt summary index: {len(fresh)} posts in {rounds} listing rounds")

    async def _upsert_summary(self, post: Post) -> None:
        async with self._summary_lock:
            self._summaries[post.id] = post.summary()
            self._summary_dirty = True

    async def _drop_summary(self, post_id: str) -> None:
        async with self._summary_lock:
            if self._summaries.pop(post_id, None) is not None:
                self._summary_dirty = True

    # ------------------------------------------------------------------
    # Category index
    # ------------------------------------------------------------------

    async def _rebuild_category_index(self) -> None:
        """Derive the category index from the summary index and persist it."""
        async with self._category_lock:
            fresh: dict[str, Category] = {}
            for summary in list(self._summaries.values()):
                for label in summary.categories:
                    category = fresh.setdefault(label, Category(label=label))
                    if summary.id not in category.posts:
                        category.posts.append(summary.id)

            self._categories = fresh
            await self._write_category_snapshot()

    async def _sync_categories(self, post_id: str, labels: Iterable[str]) -> None:
        """Make the category index match `labels` for one post, then persist it."""
        async with self._category_lock:
            reconcile_categories(self._categories, post_id, labels)
            await self._write_category_snapshot()

    async def _write_category_snapshot(self) -> None:
        # Encoded before the await so the snapshot is a consistent copy
        data = encode_category_index(self._categories)
        await self._posts.write(CATEGORY_SNAPSHOT_KEY, data, JSON_CONTENT_TYPE)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_post_by_id(self, post_id: str) -> Post | None:
        """Fetch and decode a full post record; None when it does not exist."""
        key = post_key(post_id)
        try:
            validate_key(key)
        except ValueError:
            logger.debug(f"Lookup id cannot name a record: {post_id!r}")
            return None
        if not await self._posts.exists(key):
            return None
        try:
            data = await self._posts.read(key)
        except ObjectNotFoundError:
            return None
        return decode_post(data, key=key)

    async def get_post_by_slug(self, slug: str) -> Post | None:
        self._require_initialized()
        folded = slug.casefold()
        match = next(
            (s for s in list(self._summaries.values()) if s.slug.casefold() == folded), None
        )
        if match is None:
            return None
        return await self.get_post_by_id(match.id)

    def _visible_summaries(
        self, is_admin: bool, category: str | None = None
    ) -> list[PostSummary]:
        now = self._clock()
        selected = [
            s
            for s in list(self._summaries.values())
            if s.is_visible(now, is_admin) and (not category or s.in_category(category))
        ]
        selected.sort(key=lambda s: s.pub_date, reverse=True)
        return selected

    async def list_posts(self, count: int, skip: int = 0, is_admin: bool = False) -> list[Post]:
        """Newest visible posts, skipping `skip` and returning at most `count`."""
        self._require_initialized()
        selected = self._visible_summaries(is_admin)[skip : skip + count]
        return await self._resolve(selected)

    async def list_posts_by_category(self, label: str, is_admin: bool = False) -> list[Post]:
        """All visible posts tagged with `label` (case-insensitive), newest first."""
        self._require_initialized()
        return await self._resolve(self._visible_summaries(is_admin, label))

    async def list_posts_paged(
        self,
        page_size: int,
        page_number: int = 1,
        category: str | None = None,
        is_admin: bool = False,
    ) -> PagedResult[Post]:
        """One page of visible posts, optionally restricted to a category."""
        self._require_initialized()
        selected = self._visible_summaries(is_admin, category)
        result: PagedResult[Post] = PagedResult(
            total_items=len(selected), page_size=page_size, page_number=page_number
        )
        result.items = await self._resolve(page_slice(selected, page_size, page_number))
        return result

    async def get_categories(self, is_admin: bool = False) -> list[str]:
        """Category labels with at least one post visible to the caller."""
        self._require_initialized()
        now = self._clock()
        summaries = self._summaries
        labels = [
            c.label
            for c in list(self._categories.values())
            if is_admin
            or any(pid in summaries and summaries[pid].is_visible(now) for pid in c.posts)
        ]
        return sorted(labels, key=str.casefold)

    async def _resolve(self, summaries: list[PostSummary]) -> list[Post]:
        """Fetch the full posts for summaries, healing the index on a dangling id."""
        generation = self._rebuild_generation
        fetched = await asyncio.gather(*(self.get_post_by_id(s.id) for s in summaries))
        posts = [p for p in fetched if p is not None]

        if len(posts) < len(fetched):
            missing = [s.id for s, p in zip(summaries, fetched, strict=True) if p is None]
            logger.warning(
                f"Summary index references missing records {missing}; rebuilding indices"
            )
            if generation == self._rebuild_generation:
                await self._rebuild_summary_index()
                await self._rebuild_category_index()

        return posts

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save_post(self, post: Post) -> None:
        """
        Persist a post and update the indices.

        The record is written first; if that fails nothing else changes.
        Concurrent saves of the same post are last-write-wins.
        """
        self._require_initialized()
        post.date_modified = self._clock()

        await self._posts.write(post_key(post.id), encode_post(post), JSON_CONTENT_TYPE)
        logger.debug(f"Saved post {post.id} ({post.slug})")

        await self._upsert_summary(post)
        await self._sync_categories(post.id, post.categories)
        await self._invalidate_cached_post(post.id)

    async def delete_post(self, post: PostSummary) -> None:
        """Remove a post record and every cached trace of it (idempotent)."""
        self._require_initialized()
        key = post_key(post.id)
        if await self._posts.exists(key):
            try:
                await self._posts.delete(key)
            except ObjectNotFoundError:
                pass
            logger.debug(f"Deleted post {post.id}")

        await self._drop_summary(post.id)
        await self._sync_categories(post.id, ())
        await self._invalidate_cached_post(post.id)

    async def _invalidate_cached_post(self, post_id: str) -> None:
        key = CacheKey.for_model(Post, post_id)
        try:
            await self._response_cache.remove(key)
        except (ConnectionError, OSError) as e:
            logger.error(f"Cache remove failed: {key}: {e}")

    async def save_file(self, data: bytes, file_name: str, suffix: str | None = None) -> str:
        """
        Store an uploaded file under a suffix-disambiguated name.

        Returns:
            Durable URI of the stored file
        """
        self._require_initialized()
        name = derive_file_name(file_name, suffix)
        content_type = mimetypes.guess_type(name)[0] or DEFAULT_CONTENT_TYPE
        await self._files.write(name, data, content_type)
        logger.debug(f"Saved file {name} ({len(data)} bytes)")
        return self._files.uri(name)


def reconcile_categories(
    categories: dict[str, Category], post_id: str, labels: Iterable[str]
) -> None:
    """
    Make `categories` list `post_id` under exactly `labels`.

    Drops the id from categories it no longer belongs to, deletes categories
    left without members, and adds the id (once) to every listed label.
    Running it again with the same labels changes nothing.
    """
    wanted = list(dict.fromkeys(labels))

    for category in list(categories.values()):
        if post_id not in category.posts or category.label in wanted:
            continue
        category.posts.remove(post_id)
        if not category.posts:
            del categories[category.label]

    for label in wanted:
        category = categories.get(label)
        if category is None:
            category = categories[label] = Category(label=label)
        if post_id not in category.posts:
            category.posts.append(post_id)


def derive_file_name(file_name: str, suffix: str | None = None) -> str:
    """`{name}_{suffix}{ext}` restricted to portable characters.

    Example:
        >>> derive_file_name("My Photo.png", "42")
        'MyPhoto_42.png'
    """
    base = os.path.basename(file_name.replace("\\", "/"))
    stem, ext = os.path.splitext(base)
    clean_suffix = sanitize_file_component(suffix if suffix is not None else timestamp_suffix())
    if not clean_suffix:
        clean_suffix = timestamp_suffix()
    return f"{sanitize_file_component(stem)}_{clean_suffix}{sanitize_file_component(ext)}"
