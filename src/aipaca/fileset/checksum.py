"""SHA-256 fingerprints for files and directory trees."""

from __future__ import annotations

import hashlib
from pathlib import Path

from .tree import list_all_files

_CHUNK_SIZE = 1024 * 1024
_PREFIX = "sha256:"


def file_checksum(path: Path) -> str:
    """Return the `sha256:<hex>` digest of a file's contents."""
    digest = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return _PREFIX + digest.hexdigest()


def dir_checksum(directory: Path) -> str:
    """Return a digest covering every relative path and file digest in a tree.

    Two trees share a digest exactly when they hold the same file set with the
    same contents.
    """
    root = Path(directory)
    digest = hashlib.sha256()
    for relative in list_all_files(root):
        digest.update(relative.encode("utf-8"))
        digest.update(file_checksum(root / relative).encode("ascii"))
    return _PREFIX + digest.hexdigest()


__all__ = ["dir_checksum", "file_checksum"]
