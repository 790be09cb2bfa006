"""Two-tree reconciliation between a repository and a stored profile or backup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping

from aipaca.fileset.tree import list_all_files

from .models import ChangeKind, DiffReport, FileChange

LOGGER = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024

Comparator = Callable[[Path, Path], bool]


def files_equal(first: Path, second: Path) -> bool:
    """Return whether two files hold byte-identical contents.

    Raises:
        OSError: If either file cannot be read.
    """
    first = Path(first)
    second = Path(second)
    if first.stat().st_size != second.stat().st_size:
        return False
    with first.open("rb") as left, second.open("rb") as right:
        while True:
            left_chunk = left.read(_CHUNK_SIZE)
            right_chunk = right.read(_CHUNK_SIZE)
            if left_chunk != right_chunk:
                return False
            if not left_chunk:
                return True


def flatten_file_set(file_set: Mapping[str, Path]) -> dict[str, Path]:
    """Expand directory entries of an AI file set into individual files.

    Each file found under a directory entry is re-keyed beneath that entry's
    relative path, so the result is comparable with a flat profile listing.

    Raises:
        OSError: If a directory entry cannot be listed.
    """
    flattened: dict[str, Path] = {}
    for relative, absolute in file_set.items():
        absolute = Path(absolute)
        if absolute.is_dir():
            for nested in list_all_files(absolute):
                flattened[f"{relative}/{nested}"] = absolute / nested
        else:
            flattened[relative] = absolute
    return dict(sorted(flattened.items()))


def list_tree(directory: Path) -> dict[str, Path]:
    """Return a flat relative-path mapping of every file under `directory`."""
    root = Path(directory)
    return {relative: root / relative for relative in list_all_files(root)}


def diff_trees(
    repo: Mapping[str, Path],
    reference: Mapping[str, Path],
    comparator: Comparator = files_equal,
) -> DiffReport:
    """Classify every path that differs between two flat file trees.

    Paths only in `repo` are added, paths only in `reference` are removed, and
    shared paths whose contents differ are modified. A comparator that raises
    `OSError` leaves the path undetermined rather than changed.

    Args:
        repo: Flattened repository AI files.
        reference: Flattened profile or backup files.
        comparator: Byte-equality test for two absolute paths.

    Returns:
        DiffReport: Changes sorted by path plus any undetermined paths.
    """
    changes: list[FileChange] = []
    undetermined: list[str] = []

    for path in repo.keys() - reference.keys():
        changes.append(FileChange(path=path, kind=ChangeKind.ADDED))
    for path in reference.keys() - repo.keys():
        changes.append(FileChange(path=path, kind=ChangeKind.REMOVED))
    for path in repo.keys() & reference.keys():
        try:
            equal = comparator(repo[path], reference[path])
        except OSError as exc:
            LOGGER.info("Could not compare %s: %s", path, exc)
            undetermined.append(path)
            continue
        if not equal:
            changes.append(FileChange(path=path, kind=ChangeKind.MODIFIED))

    changes.sort(key=lambda change: change.path)
    return DiffReport(changes=changes, undetermined=sorted(undetermined))


def diff_directory(
    repo_file_set: Mapping[str, Path],
    reference_dir: Path,
    comparator: Comparator = files_equal,
) -> DiffReport:
    """Flatten a repository AI file set and diff it against a stored tree."""
    return diff_trees(flatten_file_set(repo_file_set), list_tree(reference_dir), comparator)


__all__ = [
    "Comparator",
    "diff_directory",
    "diff_trees",
    "files_equal",
    "flatten_file_set",
    "list_tree",
]
