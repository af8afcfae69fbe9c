"""Errors raised by the blog core."""

from __future__ import annotations


class ScribeError(Exception):
    """Base class for blog core errors."""


class DecodeError(ScribeError, ValueError):
    """A stored record or snapshot is not well-formed for its target shape.

    Signals store corruption or version skew, so it is never treated as a
    missing record by the core.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        self.key = key
        super().__init__(f"{key}: {message}" if key else message)


class EngineNotInitializedError(ScribeError, RuntimeError):
    """An engine operation was called before initialize() completed."""


class CommentsClosedError(ScribeError):
    """A comment was submitted to a post whose comment window has closed."""

    def __init__(self, post_id: str) -> None:
        self.post_id = post_id
        super().__init__(f"Comments are closed for post {post_id}")
