"""Blog query façade used by request handlers and the CLI."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from scribe.core.blog.engine import PostCacheEngine
from scribe.core.blog.errors import CommentsClosedError
from scribe.core.blog.models import Comment, Post, PostSummary
from scribe.core.blog.paging import PagedResult
from scribe.core.caching import load_model, store_model
from scribe.core.config.models import BlogSettings

logger = logging.getLogger(__name__)


class BlogService:
    """
    Thin adapter over PostCacheEngine.

    Adds the blog-level defaults (page size, comment window) and the rules
    that belong to the caller rather than the cache: single-post lookups hide
    unpublished posts from non-admins, and comment authorship flags are
    stamped here.
    """

    def __init__(self, engine: PostCacheEngine, settings: BlogSettings | None = None):
        self.engine = engine
        self.settings = settings or BlogSettings()

    async def list_posts(self, count: int, skip: int = 0, is_admin: bool = False) -> list[Post]:
        return await self.engine.list_posts(count, skip, is_admin)

    async def list_posts_by_category(self, label: str, is_admin: bool = False) -> list[Post]:
        return await self.engine.list_posts_by_category(label, is_admin)

    async def list_posts_paged(
        self,
        page_number: int = 1,
        page_size: int | None = None,
        category: str | None = None,
        is_admin: bool = False,
    ) -> PagedResult[Post]:
        return await self.engine.list_posts_paged(
            page_size or self.settings.posts_per_page, page_number, category, is_admin
        )

    async def get_categories(self, is_admin: bool = False) -> list[str]:
        return await self.engine.get_categories(is_admin)

    async def get_post_by_id(self, post_id: str, is_admin: bool = False) -> Post | None:
        """Fetch a post, memoized in the response cache."""
        cache = self.engine.response_cache
        post = await load_model(cache, post_id, Post)
        if post is None:
            post = await self.engine.get_post_by_id(post_id)
            if post is not None:
                await store_model(cache, post_id, post)
        return self._visible(post, is_admin)

    async def get_post_by_slug(self, slug: str, is_admin: bool = False) -> Post | None:
        return self._visible(await self.engine.get_post_by_slug(slug), is_admin)

    def _visible(self, post: Post | None, is_admin: bool) -> Post | None:
        if post is None or post.is_visible(self.engine.now(), is_admin):
            return post
        return None

    async def save_post(self, post: Post) -> None:
        await self.engine.save_post(post)

    async def delete_post(self, post: PostSummary) -> None:
        await self.engine.delete_post(post)

    async def save_file(self, data: bytes, file_name: str, suffix: str | None = None) -> str:
        return await self.engine.save_file(data, file_name, suffix)

    async def create_post(
        self,
        title: str,
        content: str,
        *,
        excerpt: str = "",
        categories: Iterable[str] = (),
        slug: str | None = None,
        publish: bool = False,
    ) -> Post:
        """Build a new post from editor input and save it.

        Args:
            title: Post title (the slug is derived from it unless given)
            content: Post body
            excerpt: Short teaser shown in listings
            categories: Category labels, blanks dropped
            slug: Explicit slug
            publish: Publish immediately instead of saving a draft

        Returns:
            The saved post
        """
        labels = [c.strip() for c in categories if c and c.strip()]
        post = Post(
            title=title.strip(),
            slug=slug or "",
            excerpt=excerpt.strip(),
            content=content,
            categories=labels,
        )
        if publish:
            post.publish(self.engine.now())

        await self.engine.save_post(post)
        logger.info(f"Created post {post.id} ({post.slug})")
        return post

    async def add_comment(
        self,
        post_id: str,
        author: str,
        email: str,
        content: str,
        is_admin: bool = False,
    ) -> Comment | None:
        """
        Append a comment to a post.

        Returns:
            The stored comment, or None when the post does not exist or is
            hidden from the caller

        Raises:
            CommentsClosedError: Comment window elapsed and caller is not an admin
        """
        post = await self.get_post_by_id(post_id, is_admin)
        if post is None:
            return None

        close_after = self.settings.comments_close_after_days
        if not is_admin and not post.are_comments_open(close_after, self.engine.now()):
            raise CommentsClosedError(post_id)

        comment = Comment(
            author=author.strip(),
            email=email.strip(),
            content=content.strip(),
            pub_date=self.engine.now(),
            is_admin=is_admin,
        )
        post.comments.append(comment)
        await self.engine.save_post(post)
        return comment

    async def delete_comment(self, post_id: str, comment_id: str) -> bool:
        """Remove a comment; False when the post or the comment does not exist."""
        post = await self.engine.get_post_by_id(post_id)
        if post is None:
            return False

        comment = post.find_comment(comment_id)
        if comment is None:
            return False

        post.comments.remove(comment)
        await self.engine.save_post(post)
        return True
