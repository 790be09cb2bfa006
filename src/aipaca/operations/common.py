"""Helpers shared by the repository operations."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from aipaca.fileset import remove_path
from aipaca.storage import InvalidInputError, StorageIOError

LOGGER = logging.getLogger(__name__)


def resolve_repo_path(repo_path: Path | str | None) -> Path:
    """Return the absolute repository path, defaulting to the working directory.

    Raises:
        InvalidInputError: If the path is not an existing directory.
    """
    raw = Path(repo_path).expanduser() if repo_path else Path.cwd()
    resolved = Path(os.path.abspath(raw))
    if not resolved.is_dir():
        raise InvalidInputError(f"Repository path {resolved} is not a directory.")
    return resolved


def remove_entries(entries: Mapping[str, Path]) -> None:
    """Delete every matched AI entry from a repository.

    Raises:
        StorageIOError: On the first failed removal; earlier removals stand.
    """
    for relative, absolute in entries.items():
        try:
            remove_path(absolute)
        except OSError as exc:
            raise StorageIOError(f"Failed to remove {relative}: {exc}") from exc
        LOGGER.debug("Removed %s", relative)


__all__ = ["remove_entries", "resolve_repo_path"]
