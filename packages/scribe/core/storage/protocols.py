"""Protocol for object store backends (async-first).

An object store is one container of key -> blob entries. The cache engine
uses one store for post records and snapshots, and another for uploaded files.
"""

from typing import Protocol

from .models import DEFAULT_CONTENT_TYPE, ListPage


class ObjectStore(Protocol):
    """
    Durable key/blob storage.

    Implementations must make `write` atomic from a reader's perspective and
    must return keys from `list_keys` in a stable order so continuation
    cursors are meaningful.
    """

    async def ensure_container(self, public: bool = False) -> None:
        """Create the container if it does not exist (idempotent)."""
        ...

    async def exists(self, key: str) -> bool:
        """Check whether an object exists."""
        ...

    async def read(self, key: str) -> bytes:
        """
        Read an object.

        Raises:
            ObjectNotFoundError: If key is absent
        """
        ...

    async def write(
        self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE
    ) -> None:
        """Create or overwrite an object."""
        ...

    async def delete(self, key: str) -> None:
        """
        Delete an object.

        Raises:
            ObjectNotFoundError: If key is absent
        """
        ...

    async def list_keys(
        self, prefix: str = "", page_size: int = 20, continuation: str | None = None
    ) -> ListPage:
        """
        List keys starting with prefix, one page at a time.

        Args:
            prefix: Key prefix filter
            page_size: Maximum keys per page
            continuation: Cursor returned by the previous page, or None to start

        Returns:
            ListPage with keys and the next cursor (None when exhausted)
        """
        ...

    def uri(self, key: str) -> str:
        """Durable location of an object (sync, no I/O)."""
        ...
