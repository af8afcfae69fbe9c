"""Blog domain: models, codec, cache engine and query façade."""

from scribe.core.blog.engine import PostCacheEngine
from scribe.core.blog.errors import (
    CommentsClosedError,
    DecodeError,
    EngineNotInitializedError,
    ScribeError,
)
from scribe.core.blog.models import UNPUBLISHED, Category, Comment, Post, PostSummary
from scribe.core.blog.paging import PagedResult
from scribe.core.blog.service import BlogService
from scribe.core.blog.slugs import create_slug

__all__ = [
    "UNPUBLISHED",
    "BlogService",
    "Category",
    "Comment",
    "CommentsClosedError",
    "DecodeError",
    "EngineNotInitializedError",
    "PagedResult",
    "Post",
    "PostCacheEngine",
    "PostSummary",
    "ScribeError",
    "create_slug",
]
