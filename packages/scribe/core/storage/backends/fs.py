"""Filesystem-backed object store using core.io for all operations.

Each container is a directory; each object is a file named by its key.
Content types are not persisted (the file extension carries that role).
"""

import logging

from scribe.core.io import AbsolutePath, FileSystem
from scribe.core.storage.models import (
    DEFAULT_CONTENT_TYPE,
    ListPage,
    ObjectNotFoundError,
    page_keys,
    validate_key,
)

logger = logging.getLogger(__name__)


class FSObjectStore:
    """
    Async object store over a FileSystem directory.

    Args:
        fs: Async filesystem implementation
        root: Absolute path of the container directory
        base_url: Public URL prefix for `uri()`; file:// URIs when None
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath, base_url: str | None = None) -> None:
        self.fs = fs
        self.root = root
        self.base_url = base_url.rstrip("/") if base_url else None
        self.public = False

    def _path(self, key: str) -> AbsolutePath:
        return self.fs.join(self.root, validate_key(key))

    async def ensure_container(self, public: bool = False) -> None:
        if not await self.fs.is_dir(self.root):
            logger.info(f"Creating storage container at {self.root}")
        await self.fs.mkdirs(self.root, exist_ok=True)
        self.public = public

    async def exists(self, key: str) -> bool:
        return await self.fs.is_file(self._path(key))

    async def read(self, key: str) -> bytes:
        try:
            return await self.fs.read_bytes(self._path(key))
        except FileNotFoundError:
            raise ObjectNotFoundError(key) from None

    async def write(
        self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE
    ) -> None:
        result = await self.fs.write_bytes(self._path(key), data)
        logger.debug(f"Wrote {key} ({result.bytes_written} bytes, {result.duration_ms:.1f} ms)")

    async def delete(self, key: str) -> None:
        try:
            await self.fs.remove(self._path(key))
        except FileNotFoundError:
            raise ObjectNotFoundError(key) from None

    async def list_keys(
        self, prefix: str = "", page_size: int = 20, continuation: str | None = None
    ) -> ListPage:
        try:
            names = await self.fs.listdir(self.root)
        except FileNotFoundError:
            return ListPage()

        # Temp files from in-flight atomic writes are not valid keys
        files = []
        for name in names:
            try:
                path = self._path(name)
            except ValueError:
                continue
            if await self.fs.is_file(path):
                files.append(name)
        return page_keys(files, prefix, page_size, continuation)

    def uri(self, key: str) -> str:
        if self.base_url:
            return f"{self.base_url}/{validate_key(key)}"
        return self._path(key).as_uri()
