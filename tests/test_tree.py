"""Tests for tree listing, copying, and checksums."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from aipaca.fileset import (
    copy_path,
    count_files,
    dir_checksum,
    file_checksum,
    list_all_files,
    list_top_level,
    remove_path,
)


def _write(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_list_all_files_is_depth_first_and_lexical(tmp_path: Path) -> None:
    _write(tmp_path / "b.txt")
    _write(tmp_path / "a" / "z.txt")
    _write(tmp_path / "a" / "nested" / "y.txt")
    (tmp_path / "empty").mkdir()

    assert list_all_files(tmp_path) == ["a/nested/y.txt", "a/z.txt", "b.txt"]
    assert count_files(tmp_path) == 3


def test_list_all_files_raises_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        list_all_files(tmp_path / "missing")


def test_list_top_level_returns_sorted_children(tmp_path: Path) -> None:
    _write(tmp_path / "b.txt")
    _write(tmp_path / "a" / "z.txt")

    assert list_top_level(tmp_path) == ["a", "b.txt"]


def test_copy_path_merges_directories(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _write(source / "rules.md", "new")
    _write(source / "commands" / "fix.md", "fix")
    destination = tmp_path / "dest"
    _write(destination / "rules.md", "old")
    _write(destination / "keep.md", "keep")

    copy_path(source, destination)

    assert (destination / "rules.md").read_text(encoding="utf-8") == "new"
    assert (destination / "keep.md").exists()
    assert (destination / "commands" / "fix.md").read_text(encoding="utf-8") == "fix"


def test_copy_path_creates_parents_for_files(tmp_path: Path) -> None:
    source = _write(tmp_path / "CLAUDE.md", "rules")

    copy_path(source, tmp_path / "out" / "docs" / "CLAUDE.md")

    assert (tmp_path / "out" / "docs" / "CLAUDE.md").read_text(encoding="utf-8") == "rules"


def test_remove_path_handles_files_directories_and_missing(tmp_path: Path) -> None:
    file_path = _write(tmp_path / "file.txt")
    directory = tmp_path / "dir"
    _write(directory / "inner.txt")

    remove_path(file_path)
    remove_path(directory)
    remove_path(tmp_path / "missing")

    assert not file_path.exists()
    assert not directory.exists()


def test_file_checksum_uses_sha256_prefix(tmp_path: Path) -> None:
    path = _write(tmp_path / "file.txt", "hello")
    expected = "sha256:" + hashlib.sha256(b"hello").hexdigest()

    assert file_checksum(path) == expected


def test_dir_checksum_tracks_names_and_contents(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    _write(first / "a" / "b.txt", "same")
    _write(second / "a" / "b.txt", "same")

    assert dir_checksum(first) == dir_checksum(second)

    _write(second / "a" / "b.txt", "different")
    assert dir_checksum(first) != dir_checksum(second)

    _write(second / "a" / "b.txt", "same")
    (second / "a" / "b.txt").rename(second / "a" / "c.txt")
    assert dir_checksum(first) != dir_checksum(second)


def test_list_all_files_follows_directory_links(tmp_path: Path) -> None:
    _write(tmp_path / "shared" / "rule.md", "shared")
    repo = tmp_path / "repo"
    _write(repo / ".claude" / "settings.json", "{}")
    (repo / ".claude" / "shared").symlink_to(tmp_path / "shared", target_is_directory=True)
    (repo / ".claude" / "dangling").symlink_to(tmp_path / "missing")

    assert list_all_files(repo / ".claude") == ["settings.json", "shared/rule.md"]


def test_copy_path_matches_listing_for_linked_directories(tmp_path: Path) -> None:
    _write(tmp_path / "shared" / "rule.md", "shared")
    source = tmp_path / "source"
    _write(source / "settings.json", "{}")
    (source / "shared").symlink_to(tmp_path / "shared", target_is_directory=True)
    (source / "dangling").symlink_to(tmp_path / "missing")
    destination = tmp_path / "dest"

    copy_path(source, destination)

    assert list_all_files(destination) == list_all_files(source)
    assert not (destination / "shared").is_symlink()
    assert (destination / "shared" / "rule.md").read_text(encoding="utf-8") == "shared"


def test_directory_link_cycles_are_not_followed(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _write(source / "a" / "rule.md")
    (source / "a" / "loop").symlink_to(source, target_is_directory=True)
    (source / "a" / "self").symlink_to(source / "a", target_is_directory=True)

    assert list_all_files(source) == ["a/rule.md"]

    copy_path(source, tmp_path / "dest")

    assert list_all_files(tmp_path / "dest") == ["a/rule.md"]
