"""Typed helpers for caching pydantic models in a ResponseCache.

Reads have miss-on-error semantics: a corrupt entry or an unreachable backend
is logged and reported as a miss, since a response cache is only ever an
optimization. Writes log failures instead of raising for the same reason.
"""

import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .models import CacheKey
from .protocols import ResponseCache

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


async def load_model(cache: ResponseCache, key: str, model_cls: type[T]) -> T | None:
    """
    Load and validate a cached model keyed by its class name.

    Args:
        cache: Response cache backend
        key: Caller-supplied key
        model_cls: Pydantic model class for validation

    Returns:
        Validated model, or None on miss/corruption/backend failure
    """
    cache_key = CacheKey.for_model(model_cls, key)
    try:
        raw = await cache.get(cache_key)
    except (ConnectionError, OSError) as e:
        logger.error(f"Cache get failed: {cache_key}: {e}")
        return None

    if raw is None:
        return None

    try:
        return model_cls.model_validate_json(raw)
    except (ValidationError, ValueError) as e:
        logger.warning(f"Discarding corrupt cache entry {cache_key}: {e}")
        return None


async def store_model(
    cache: ResponseCache, key: str, model: BaseModel, ttl_seconds: float | None = None
) -> None:
    """Serialize model to JSON and store it keyed by its class name."""
    cache_key = CacheKey.for_model(type(model), key)
    try:
        await cache.set(cache_key, model.model_dump_json().encode("utf-8"), ttl_seconds)
    except (ConnectionError, OSError) as e:
        logger.error(f"Cache set failed: {cache_key}: {e}")
