"""Directory listing and copy helpers shared by storage and reconciliation."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable, Iterator

LOGGER = logging.getLogger(__name__)


def list_all_files(directory: Path) -> list[str]:
    """Return every regular file beneath `directory`, relative and `/`-joined.

    Traversal is depth-first with entries visited in lexical order, so the
    result is deterministic for a given filesystem state. Directories are never
    listed and symlinked directories are not followed.

    Args:
        directory: Root directory to enumerate.

    Returns:
        list[str]: Relative file paths.

    Raises:
        FileNotFoundError: If `directory` does not exist.
        NotADirectoryError: If `directory` is not a directory.
        OSError: If any directory in the tree cannot be read.
    """
    return [relative for relative, _ in _walk(Path(directory), "")]


def count_files(directory: Path) -> int:
    """Return the number of files `list_all_files` would report."""
    return len(list_all_files(directory))


def list_top_level(directory: Path) -> list[str]:
    """Return the sorted names of the direct children of `directory`."""
    return sorted(child.name for child in Path(directory).iterdir())


def copy_path(source: Path, destination: Path) -> None:
    """Copy a file or a whole directory tree to `destination`.

    Parent directories are created as needed. Copying a directory onto an
    existing directory merges the trees, overwriting files that clash.

    Raises:
        FileNotFoundError: If `source` does not exist.
        OSError: If any part of the copy fails.
    """
    source = Path(source)
    destination = Path(destination)
    if source.is_dir():
        LOGGER.debug("Copying directory %s -> %s", source, destination)
        shutil.copytree(source, destination, dirs_exist_ok=True, ignore=_unlisted_links(source))
        return
    if not source.exists():
        raise FileNotFoundError(f"Source path is missing: {source}")
    LOGGER.debug("Copying file %s -> %s", source, destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)


def remove_path(path: Path) -> None:
    """Remove a file, symlink, or directory tree; missing paths are ignored."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        LOGGER.debug("Removing directory %s", path)
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        LOGGER.debug("Removing file %s", path)
        path.unlink()


def _walk(
    directory: Path, prefix: str, ancestors: frozenset[Path] = frozenset()
) -> Iterator[tuple[str, Path]]:
    ancestors = ancestors | {directory.resolve()}
    for child in sorted(directory.iterdir(), key=lambda entry: entry.name):
        relative = f"{prefix}{child.name}"
        if child.is_dir():
            if child.is_symlink() and child.resolve() in ancestors:
                LOGGER.debug("Skipping directory link cycle at %s", child)
                continue
            yield from _walk(child, f"{relative}/", ancestors)
        elif child.is_file():
            yield relative, child


def _unlisted_links(root: Path) -> Callable[[str, list[str]], set[str]]:
    """Build a `copytree` ignore hook that skips what `_walk` skips.

    `copytree` reports each directory by its path under `root`, so the real
    directories along that path are the ones a link must not point back to.
    """
    root = Path(root)

    def _ignore(current: str, names: list[str]) -> set[str]:
        node = root
        ancestors = {node.resolve()}
        for part in Path(current).relative_to(root).parts:
            node = node / part
            ancestors.add(node.resolve())

        skipped: set[str] = set()
        for name in names:
            child = Path(current) / name
            if not child.is_symlink():
                continue
            if not child.exists():
                skipped.add(name)
            elif child.is_dir() and child.resolve() in ancestors:
                skipped.add(name)
        return skipped

    return _ignore


__all__ = ["copy_path", "count_files", "list_all_files", "list_top_level", "remove_path"]
