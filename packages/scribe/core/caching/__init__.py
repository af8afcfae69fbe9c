"""Distributed response cache for Scribe.

Async-first key -> bytes cache used to memoize computed responses:
- CacheKey namespaces keys by logical type name
- Null, in-memory and Redis backends behind one protocol
- Typed helpers for pydantic models with miss-on-error reads
"""

from scribe.core.caching.backends.memory import MemoryResponseCache
from scribe.core.caching.backends.null import NullResponseCache
from scribe.core.caching.models import CacheKey
from scribe.core.caching.protocols import ResponseCache
from scribe.core.caching.typed import load_model, store_model

__all__ = [
    # Core
    "ResponseCache",
    "CacheKey",
    # Backends
    "MemoryResponseCache",
    "NullResponseCache",
    # Typed helpers
    "load_model",
    "store_model",
]
