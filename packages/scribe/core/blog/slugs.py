"""Slug, file-name and identifier helpers.

Everything that ends up in a URL or an object key is restricted to the
portable character set [0-9A-Za-z._-].
"""

from __future__ import annotations

import re
import threading
import time
import unicodedata

_DISALLOWED = re.compile(r"[^0-9A-Za-z._-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")

_id_lock = threading.Lock()
_last_id = 0


def strip_diacritics(text: str) -> str:
    """Remove combining marks, keeping the base characters.

    Example:
        >>> strip_diacritics("Héllo Wörld")
        'Hello World'
    """
    decomposed = unicodedata.normalize("NFD", text)
    kept = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", kept)


def create_slug(title: str) -> str:
    """Derive a URL slug from a title.

    Lowercases, turns whitespace into hyphens, strips diacritics and drops
    every character outside [0-9a-z._-]. Runs of hyphens collapse to one and
    leading/trailing hyphens are trimmed.

    Example:
        >>> create_slug("Héllo, World!")
        'hello-world'
    """
    slug = re.sub(r"\s", "-", title.lower())
    slug = _DISALLOWED.sub("", strip_diacritics(slug))
    slug = _HYPHEN_RUNS.sub("-", slug).strip("-")
    return slug.lower()


def sanitize_file_component(text: str) -> str:
    """Strip characters that are not safe in a portable file name.

    Example:
        >>> sanitize_file_component("my photo?*.png")
        'myphoto.png'
    """
    return _DISALLOWED.sub("", strip_diacritics(text))


def generate_post_id() -> str:
    """Return a new post id.

    Ids are decimal microseconds since the epoch, bumped when needed so that
    every id handed out by this process is strictly greater than the last.
    """
    global _last_id
    with _id_lock:
        candidate = time.time_ns() // 1000
        _last_id = candidate if candidate > _last_id else _last_id + 1
        return str(_last_id)


def timestamp_suffix() -> str:
    """Default suffix for uploaded file names (100ns ticks)."""
    return str(time.time_ns() // 100)
