"""State repository tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from aipaca.storage import STATE_FILENAME, RepoState, StateError, StateRepository


def test_missing_record_reads_as_empty(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path / "state")

    assert repo.get(tmp_path / "project") is None
    assert not repo.state_file.exists()


def test_record_apply_round_trip(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path / "state")
    project = tmp_path / "project"

    repo.record_apply(project, "work", "project-2025-01-02-030405")

    loaded = repo.get(project)
    assert loaded is not None
    assert loaded.applied_profile == "work"
    assert loaded.applied_at is not None
    assert loaded.backup_path == "project-2025-01-02-030405"
    assert repo.get_applied_profile(project) == "work"
    assert repo.get_backup_for_repo(project) == "project-2025-01-02-030405"

    raw = yaml.safe_load((tmp_path / "state" / STATE_FILENAME).read_text(encoding="utf-8"))
    assert list(raw["repos"]) == [str(project)]


def test_relative_paths_are_stored_absolute(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    repo = StateRepository(tmp_path / "state")

    repo.set(Path("project"), RepoState(backup_path="project-2025-01-02-030405"))

    raw = yaml.safe_load(repo.state_file.read_text(encoding="utf-8"))
    assert list(raw["repos"]) == [os.path.join(str(tmp_path), "project")]
    assert repo.get_backup_for_repo(tmp_path / "project") == "project-2025-01-02-030405"


def test_clear_removes_only_that_repository(tmp_path: Path) -> None:
    repo = StateRepository(tmp_path / "state")
    repo.record_apply(tmp_path / "one", "work", None)
    repo.record_apply(tmp_path / "two", "home", None)

    repo.clear(tmp_path / "one")

    assert repo.get(tmp_path / "one") is None
    assert repo.get_applied_profile(tmp_path / "two") == "home"


def test_orphaned_and_empty_entries_are_tolerated(tmp_path: Path) -> None:
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    (state_dir / STATE_FILENAME).write_text(
        "repos:\n  /gone/repo:\n    applied_profile: work\n  /empty/repo:\n",
        encoding="utf-8",
    )
    repo = StateRepository(state_dir)

    assert repo.get_applied_profile(Path("/gone/repo")) == "work"
    assert repo.get(Path("/empty/repo")) == RepoState()


def test_invalid_record_raises_state_error(tmp_path: Path) -> None:
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    (state_dir / STATE_FILENAME).write_text("repos: [not, a, mapping]\n", encoding="utf-8")

    with pytest.raises(StateError):
        StateRepository(state_dir).get(tmp_path)


def test_failed_write_keeps_previous_record(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo = StateRepository(tmp_path / "state")
    repo.record_apply(tmp_path / "project", "work", None)
    before = repo.state_file.read_text(encoding="utf-8")

    def _fail_replace(*_: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("aipaca.storage.state.os.replace", _fail_replace)

    with pytest.raises(StateError):
        repo.record_apply(tmp_path / "project", "home", None)

    assert repo.state_file.read_text(encoding="utf-8") == before
    assert [entry.name for entry in repo.state_file.parent.iterdir()] == [STATE_FILENAME]
