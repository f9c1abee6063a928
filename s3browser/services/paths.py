"""Translation of virtual browse paths into bucket key prefixes.

Object storage has no notion of ``.`` or ``..``: such segments are kept as
literal key components and can never address anything outside the bucket.
Staying inside the configured base directory relies on every virtual path
going through :func:`normalize_path`, which re-roots it under the base.

One leading and one trailing ``/`` are trimmed first; any delimiter still left
at either edge is then dropped, so a prefix never starts with ``/``.
"""
from __future__ import annotations

from typing import Optional

DELIMITER = "/"


def _trim_once(value: str) -> str:
    if value.startswith(DELIMITER):
        value = value[1:]
    if value.endswith(DELIMITER):
        value = value[:-1]
    return value


def _join(*parts: str) -> str:
    return DELIMITER.join(parts).strip(DELIMITER)


def normalize_path(virtual_path: Optional[str], base_directory: str = "") -> str:
    """Return the storage prefix for ``virtual_path`` without a trailing delimiter."""

    path = _trim_once(virtual_path or "")
    if base_directory:
        # only a whole leading segment match counts as "already under base"
        if path == base_directory:
            path = ""
        elif path.startswith(base_directory + DELIMITER):
            path = path[len(base_directory) + 1:]
        return _join(base_directory, path)
    # a prefix never starts with the delimiter, even for "//x"
    return path.strip(DELIMITER)


def listing_prefix(virtual_path: Optional[str], base_directory: str = "") -> str:
    """Prefix handed to a delimiter listing: normalized, ``/``-terminated unless root."""

    prefix = normalize_path(virtual_path, base_directory)
    if prefix:
        prefix += DELIMITER
    return prefix


def strip_prefix(key: str, prefix: str) -> str:
    if prefix and key.startswith(prefix):
        return key[len(prefix):]
    return key


def base_name(key: str) -> str:
    """Leaf segment of a key, ignoring a trailing delimiter."""

    return key.rstrip(DELIMITER).rsplit(DELIMITER, 1)[-1]


def parent_path(virtual_path: Optional[str]) -> Optional[str]:
    """Virtual parent of ``virtual_path``; ``None`` when already at the root."""

    clean = (virtual_path or "").strip(DELIMITER)
    if not clean:
        return None
    parent, _, _ = clean.rpartition(DELIMITER)
    return f"{DELIMITER}{parent}" if parent else DELIMITER
