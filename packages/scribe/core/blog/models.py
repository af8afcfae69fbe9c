"""Domain models for posts, comments and categories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from scribe.core.blog.slugs import create_slug, generate_post_id

# Publish date of a post that has not been published
UNPUBLISHED = datetime.max.replace(tzinfo=UTC)

# Post ids become part of object keys
POST_ID_PATTERN = r"^[0-9A-Za-z._-]+$"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Comment(BaseModel):
    """A reader comment on a post.

    `is_admin` records whether the submitter was authenticated as an
    administrator; it is stamped by the service, never taken from input.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex)
    author: str
    email: str
    content: str
    pub_date: datetime = Field(default_factory=utc_now)
    is_admin: bool = False

    @field_validator("pub_date", mode="after")
    @classmethod
    def _normalize_pub_date(cls, value: datetime) -> datetime:
        return _as_utc(value)


class PostSummary(BaseModel):
    """Lightweight projection of a post held in the summary index.

    Never carries the body or comments.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=generate_post_id, pattern=POST_ID_PATTERN)
    title: str
    slug: str = ""
    excerpt: str = ""
    pub_date: datetime = UNPUBLISHED
    date_created: datetime = Field(default_factory=utc_now)
    date_modified: datetime = Field(default_factory=utc_now)
    categories: list[str] = Field(default_factory=list)

    @field_validator("pub_date", "date_created", "date_modified", mode="after")
    @classmethod
    def _normalize_timestamps(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _derive_slug(self) -> PostSummary:
        if not self.slug:
            self.slug = create_slug(self.title)
        return self

    @property
    def is_published(self) -> bool:
        """A post is published once its publish date has passed."""
        return self.pub_date <= utc_now()

    def is_visible(self, now: datetime, is_admin: bool = False) -> bool:
        """Whether a caller sees this post at `now` (admins see everything)."""
        return is_admin or self.pub_date <= now

    def publish(self, when: datetime | None = None) -> None:
        """Publish now (or at `when`); keeps an existing schedule."""
        if when is not None:
            self.pub_date = _as_utc(when)
        elif self.pub_date == UNPUBLISHED:
            self.pub_date = utc_now()

    def unpublish(self) -> None:
        self.pub_date = UNPUBLISHED

    def in_category(self, label: str) -> bool:
        """Case-insensitive category membership."""
        folded = label.casefold()
        return any(c.casefold() == folded for c in self.categories)

    def get_link(self) -> str:
        return f"/blog/{self.slug}/"


class Post(PostSummary):
    """A full post: summary fields plus body and comments."""

    content: str = ""
    comments: list[Comment] = Field(default_factory=list)

    def summary(self) -> PostSummary:
        """Project to the summary shape, dropping body and comments."""
        return PostSummary(
            id=self.id,
            title=self.title,
            slug=self.slug,
            excerpt=self.excerpt,
            pub_date=self.pub_date,
            date_created=self.date_created,
            date_modified=self.date_modified,
            categories=list(self.categories),
        )

    def are_comments_open(self, close_after_days: int, now: datetime | None = None) -> bool:
        """Comments stay open for `close_after_days` after publication."""
        now = now or utc_now()
        if self.pub_date > now:
            return False
        return self.pub_date + timedelta(days=close_after_days) >= now

    def find_comment(self, comment_id: str) -> Comment | None:
        return next((c for c in self.comments if c.id == comment_id), None)


class Category(BaseModel):
    """A category label and the ids of the posts tagged with it."""

    model_config = ConfigDict(extra="ignore")

    label: str
    posts: list[str] = Field(default_factory=list)
