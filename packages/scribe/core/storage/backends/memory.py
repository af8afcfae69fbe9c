"""In-memory object store for development and testing."""

from scribe.core.storage.models import (
    DEFAULT_CONTENT_TYPE,
    ListPage,
    ObjectNotFoundError,
    page_keys,
    validate_key,
)


class MemoryObjectStore:
    """
    Dict-backed object store.

    Operations complete immediately but keep the async interface. Writes
    replace the stored bytes in a single assignment, so readers see either
    the old or the new object.
    """

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self.public = False
        self._objects: dict[str, tuple[bytes, str]] = {}

    async def ensure_container(self, public: bool = False) -> None:
        self.public = public

    async def exists(self, key: str) -> bool:
        return validate_key(key) in self._objects

    async def read(self, key: str) -> bytes:
        try:
            return self._objects[validate_key(key)][0]
        except KeyError:
            raise ObjectNotFoundError(key) from None

    async def write(
        self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE
    ) -> None:
        self._objects[validate_key(key)] = (bytes(data), content_type)

    async def delete(self, key: str) -> None:
        try:
            del self._objects[validate_key(key)]
        except KeyError:
            raise ObjectNotFoundError(key) from None

    async def list_keys(
        self, prefix: str = "", page_size: int = 20, continuation: str | None = None
    ) -> ListPage:
        return page_keys(list(self._objects), prefix, page_size, continuation)

    def uri(self, key: str) -> str:
        return f"memory://{self.name}/{validate_key(key)}"

    def content_type(self, key: str) -> str:
        """Content type recorded for key (test helper)."""
        try:
            return self._objects[key][1]
        except KeyError:
            raise ObjectNotFoundError(key) from None

    def __len__(self) -> int:
        return len(self._objects)
