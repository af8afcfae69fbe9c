"""Filesystem abstraction layer for Scribe.

Async filesystem operations behind a protocol, so storage backends can run
against disk or against an in-memory fake.

Example:
    >>> from scribe.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/srv/blog"), "posts", "post-1.json")
    >>> await fs.write_bytes(path, b"{}")
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, WriteResult, absolute_path
from .protocols import FileSystem

__all__ = [
    "AbsolutePath",
    "absolute_path",
    "WriteResult",
    "FileSystem",
    "RealFileSystem",
    "FakeFileSystem",
]
