"""Models and key helpers for the object store boundary."""

import re

from pydantic import BaseModel, Field

_KEY_PATTERN = re.compile(r"^[0-9A-Za-z._-]+$")

DEFAULT_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"


class ObjectNotFoundError(KeyError):
    """Raised by a store when reading or deleting a key that does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Object not found: {self.key}"


class ListPage(BaseModel):
    """One round of a prefix listing.

    `continuation` is None once the listing is exhausted.
    """

    keys: list[str] = Field(default_factory=list)
    continuation: str | None = None


def validate_key(key: str) -> str:
    """Reject keys outside the portable character set.

    Raises:
        ValueError: If key is empty or contains other characters
    """
    if not _KEY_PATTERN.match(key) or key in (".", ".."):
        raise ValueError(f"Invalid object key: {key!r}")
    return key


def page_keys(
    keys: list[str], prefix: str, page_size: int, continuation: str | None
) -> ListPage:
    """Slice a listing into pages, resuming after the continuation key.

    The cursor is the last key of the previous page, so keys added or removed
    between rounds never cause an entry to be returned twice.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    matching = sorted(k for k in keys if k.startswith(prefix))
    if continuation is not None:
        matching = [k for k in matching if k > continuation]

    page = matching[:page_size]
    more = len(matching) > page_size
    return ListPage(keys=page, continuation=page[-1] if more else None)
