"""Pattern expansion for locating AI files inside a repository.

A repository's AI file set maps each matched relative path (always
`/`-separated) to its absolute location. The set is top-level collapsed: once
a directory is part of the set, nothing beneath it appears as a separate key,
regardless of the order in which patterns discover entries.
"""

from __future__ import annotations

import glob
import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterable

LOGGER = logging.getLogger(__name__)

_IGNORED_PATTERNS = frozenset({"", "*", "**"})
_DIRECTORY_CONTENTS_SUFFIX = "/**"


def expand_patterns(base_dir: Path, patterns: Iterable[str]) -> dict[str, Path]:
    """Expand glob-style patterns into a top-level collapsed path mapping.

    Three kinds of pattern are recognised:

    * `dir/**` adds `dir` itself when it is a directory; its contents are not
      enumerated.
    * A pattern without `*` (optionally ending in `/`) adds the literal path
      when it exists, file or directory.
    * Any other pattern containing `*` is globbed (`**` recurses, hidden
      entries included) and each match becomes an entry unless it sits below
      an entry already present.

    Args:
        base_dir: Repository root the patterns are relative to.
        patterns: Ordered patterns; duplicates and empty entries are tolerated.

    Returns:
        dict[str, Path]: Relative path to absolute path, sorted by key.
    """
    base = Path(base_dir).absolute()
    result: dict[str, Path] = {}

    for pattern in patterns:
        if pattern in _IGNORED_PATTERNS:
            continue

        if pattern.endswith(_DIRECTORY_CONTENTS_SUFFIX):
            directory = pattern[: -len(_DIRECTORY_CONTENTS_SUFFIX)]
            candidate = base / directory
            if directory and candidate.is_dir():
                _add_entry(result, base, candidate)
            continue

        if "*" not in pattern:
            candidate = base / pattern.rstrip("/")
            if candidate.exists():
                _add_entry(result, base, candidate)
            continue

        for match in _glob(base, pattern):
            _add_entry(result, base, base / match)

    return dict(sorted(result.items()))


def find_ai_files(
    base_dir: Path, patterns: Iterable[str], *, exclude: Iterable[Path] = ()
) -> dict[str, Path]:
    """Expand `patterns`, dropping entries that overlap an excluded path.

    An entry is dropped when it is an excluded path, lies inside one, or
    contains one. Comparison uses resolved paths, so a symlinked entry that
    points into an excluded tree is dropped as well.

    Args:
        base_dir: Repository root the patterns are relative to.
        patterns: Ordered glob-style patterns.
        exclude: Paths that must never be treated as AI files.

    Returns:
        dict[str, Path]: The collapsed AI file set without excluded entries.
    """
    reserved = [Path(path).expanduser().resolve() for path in exclude]
    found = expand_patterns(base_dir, patterns)
    if not reserved:
        return found

    kept: dict[str, Path] = {}
    for relative, absolute in found.items():
        if _overlaps(absolute.resolve(), reserved):
            LOGGER.info("Ignoring %s: it overlaps aipaca storage or configuration", relative)
            continue
        kept[relative] = absolute
    return kept


def is_ai_file(relative_path: str, patterns: Iterable[str]) -> bool:
    """Return whether `relative_path` falls under any of the patterns.

    A path matches when it, or one of its parent directories, is named by a
    literal pattern or matches a glob pattern.
    """
    path = PurePosixPath(relative_path.replace(os.sep, "/"))
    candidates = [str(path), *(str(parent) for parent in path.parents if str(parent) != ".")]

    for pattern in patterns:
        if pattern in _IGNORED_PATTERNS:
            continue
        cleaned = pattern
        if cleaned.endswith(_DIRECTORY_CONTENTS_SUFFIX):
            cleaned = cleaned[: -len(_DIRECTORY_CONTENTS_SUFFIX)]
        cleaned = cleaned.rstrip("/")
        if not cleaned:
            continue
        globs = [cleaned]
        if cleaned.startswith("**/"):
            globs.append(cleaned[3:])
        for candidate in candidates:
            if "*" not in cleaned and candidate == cleaned:
                return True
            if any(fnmatchcase(candidate, item) for item in globs):
                return True
    return False


def _glob(base: Path, pattern: str) -> list[str]:
    try:
        matches = glob.glob(pattern, root_dir=base, recursive=True, include_hidden=True)
    except (OSError, ValueError) as exc:
        LOGGER.debug("Skipping pattern %r: %s", pattern, exc)
        return []
    return sorted(matches)


def _add_entry(result: dict[str, Path], base: Path, absolute: Path) -> None:
    try:
        relative = absolute.relative_to(base).as_posix().rstrip("/")
    except ValueError:
        LOGGER.debug("Ignoring %s outside %s", absolute, base)
        return
    if relative in ("", ".") or relative.startswith("../") or relative == "..":
        LOGGER.debug("Ignoring match %r outside %s", relative, base)
        return
    if relative in result or _is_covered(relative, result):
        return

    for key in [key for key in result if key.startswith(f"{relative}/")]:
        del result[key]
    result[relative] = Path(os.path.normpath(absolute))


def _is_covered(relative: str, existing: Iterable[str]) -> bool:
    return any(relative.startswith(f"{key}/") for key in existing)


def _overlaps(path: Path, reserved: Iterable[Path]) -> bool:
    return any(path == item or item in path.parents or path in item.parents for item in reserved)


__all__ = ["expand_patterns", "find_ai_files", "is_ai_file"]
