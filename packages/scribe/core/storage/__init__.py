"""Object storage capability for Scribe.

The cache engine depends only on the ObjectStore protocol; backends:
- MemoryObjectStore: in-process dict (tests, throwaway instances)
- FSObjectStore: one directory per container on a core.io FileSystem
"""

from scribe.core.storage.backends.fs import FSObjectStore
from scribe.core.storage.backends.memory import MemoryObjectStore
from scribe.core.storage.models import (
    DEFAULT_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    ListPage,
    ObjectNotFoundError,
    validate_key,
)
from scribe.core.storage.protocols import ObjectStore

__all__ = [
    "ObjectStore",
    "ListPage",
    "ObjectNotFoundError",
    "DEFAULT_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "validate_key",
    "FSObjectStore",
    "MemoryObjectStore",
]
