"""Serialization codec between blog models and stored bytes.

Records are UTF-8 JSON with ISO-8601 UTC timestamps. Decoding never guesses:
anything that does not validate against the target shape raises DecodeError.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from scribe.core.blog.errors import DecodeError
from scribe.core.blog.models import Category, Post, PostSummary

M = TypeVar("M", bound=BaseModel)

_summary_index_adapter = TypeAdapter(dict[str, PostSummary])
_category_index_adapter = TypeAdapter(dict[str, Category])


def _decode_model(data: bytes, model_cls: type[M], key: str | None) -> M:
    try:
        return model_cls.model_validate_json(data)
    except (ValidationError, ValueError) as e:
        raise DecodeError(f"invalid {model_cls.__name__} record: {e}", key=key) from e


def encode_post(post: Post) -> bytes:
    return post.model_dump_json().encode("utf-8")


def decode_post(data: bytes, key: str | None = None) -> Post:
    return _decode_model(data, Post, key)


def encode_summary(summary: PostSummary) -> bytes:
    return summary.model_dump_json().encode("utf-8")


def decode_summary(data: bytes, key: str | None = None) -> PostSummary:
    return _decode_model(data, PostSummary, key)


def encode_summary_index(index: dict[str, PostSummary]) -> bytes:
    return _summary_index_adapter.dump_json(index)


def decode_summary_index(data: bytes, key: str | None = None) -> dict[str, PostSummary]:
    try:
        return _summary_index_adapter.validate_json(data)
    except (ValidationError, ValueError) as e:
        raise DecodeError(f"invalid summary index: {e}", key=key) from e


def encode_category_index(index: dict[str, Category]) -> bytes:
    return _category_index_adapter.dump_json(index)


def decode_category_index(data: bytes, key: str | None = None) -> dict[str, Category]:
    try:
        return _category_index_adapter.validate_json(data)
    except (ValidationError, ValueError) as e:
        raise DecodeError(f"invalid category index: {e}", key=key) from e
