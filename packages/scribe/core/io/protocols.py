"""Protocol for async filesystem operations used by the storage backends."""

from typing import Protocol

from .models import AbsolutePath, WriteResult


class FileSystem(Protocol):
    """
    Async filesystem used by the filesystem object store.

    Writes must be atomic: readers never observe a partially written file.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Safely join path components.

        Raises:
            ValueError: If the result escapes the base directory
        """
        ...

    async def exists(self, path: AbsolutePath) -> bool:
        """Check if path exists (file or directory)."""
        ...

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if path exists and is a file."""
        ...

    async def is_dir(self, path: AbsolutePath) -> bool:
        """Check if path exists and is a directory."""
        ...

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        ...

    async def write_bytes(self, path: AbsolutePath, data: bytes) -> WriteResult:
        """
        Atomically write bytes to a file, creating parent directories.

        Uses temp file + atomic replace so readers never see partial content.
        """
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory and all parents."""
        ...

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """
        List directory entry names, sorted.

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def remove(self, path: AbsolutePath) -> None:
        """
        Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        ...
