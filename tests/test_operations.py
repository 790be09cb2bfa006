"""Tests for the apply, save, clean, restore, diff, and status operations."""

from __future__ import annotations

from pathlib import Path

import pytest

from aipaca.config.models import AipacaConfig, StorageSettings
from aipaca.operations import (
    ApplyOptions,
    CleanOptions,
    DiffOptions,
    RestoreOptions,
    SaveOptions,
    apply_profile,
    clean_repo,
    diff_profile,
    repo_status,
    restore_repo,
    save_profile,
)
from aipaca.reconcile import ChangeKind
from aipaca.storage import AlreadyExistsError, InvalidInputError, NotFoundError, Storage


def _write(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _config(tmp_path: Path) -> AipacaConfig:
    config = AipacaConfig(storage=StorageSettings(path=str(tmp_path / "store")))
    Storage(config).init()
    return config


def _repo(tmp_path: Path, name: str = "project") -> Path:
    repo = tmp_path / name
    _write(repo / ".claude" / "settings.json", '{"model": "a"}')
    _write(repo / "CLAUDE.md", "project rules")
    _write(repo / "src" / "app.py", "print('hi')")
    return repo


def _snapshot(*roots: Path) -> dict[str, bytes]:
    snapshot: dict[str, bytes] = {}
    for root in roots:
        for path in sorted(root.rglob("*")):
            key = str(path)
            snapshot[key] = path.read_bytes() if path.is_file() else b"<dir>"
    return snapshot


def _make_profile(config: AipacaConfig, tmp_path: Path, name: str = "work") -> Path:
    source = tmp_path / f"{name}-source"
    _write(source / ".cursor" / "rules" / "style.md", f"{name} style")
    _write(source / "CLAUDE.md", f"{name} rules")
    save_profile(config, SaveOptions(as_name=name, repo_path=source))
    return source


def test_save_new_profile_then_edit_shows_one_modification(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)

    result = save_profile(config, SaveOptions(as_name="work", repo_path=repo))
    assert result.is_new
    assert result.files_saved == [".claude", "CLAUDE.md"]

    (repo / "CLAUDE.md").write_text("edited rules", encoding="utf-8")
    diff = diff_profile(config, DiffOptions(profile_name="work", repo_path=repo))

    assert [(change.path, change.kind) for change in diff.changes] == [
        ("CLAUDE.md", ChangeKind.MODIFIED)
    ]
    assert diff.has_changes


def test_save_as_existing_profile_requires_force(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)
    save_profile(config, SaveOptions(as_name="work", repo_path=repo))

    with pytest.raises(AlreadyExistsError):
        save_profile(config, SaveOptions(as_name="work", repo_path=repo))

    result = save_profile(config, SaveOptions(as_name="work", repo_path=repo, force=True))
    assert not result.is_new


def test_save_without_target_needs_applied_profile(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)

    with pytest.raises(InvalidInputError):
        save_profile(config, SaveOptions(repo_path=repo))


def test_save_defaults_to_applied_profile(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path)
    repo = _repo(tmp_path)
    apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))

    (repo / "CLAUDE.md").write_text("tweaked", encoding="utf-8")
    result = save_profile(config, SaveOptions(repo_path=repo))

    assert result.profile_name == "work"
    stored = Storage(config).get_profile("work").path / "CLAUDE.md"
    assert stored.read_text(encoding="utf-8") == "tweaked"


def test_apply_replaces_ai_files_and_records_state(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path)
    repo = _repo(tmp_path)

    result = apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))

    assert result.files_removed == [".claude", "CLAUDE.md"]
    assert result.files_applied == [".cursor/rules/style.md", "CLAUDE.md"]
    assert result.backup_name is not None
    assert not (repo / ".claude").exists()
    assert (repo / "CLAUDE.md").read_text(encoding="utf-8") == "work rules"
    assert (repo / "src" / "app.py").exists()

    state = Storage(config).state.get(repo)
    assert state is not None
    assert state.applied_profile == "work"
    assert state.backup_path == result.backup_name

    diff = diff_profile(config, DiffOptions(repo_path=repo))
    assert not diff.has_changes


def test_apply_missing_profile_raises(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)

    with pytest.raises(NotFoundError):
        apply_profile(config, ApplyOptions(profile_name="missing", repo_path=repo))


def test_apply_without_backup_protects_unsaved_edits(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path, "work")
    _make_profile(config, tmp_path, "home")
    repo = _repo(tmp_path)
    apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))
    (repo / "CLAUDE.md").write_text("unsaved", encoding="utf-8")

    with pytest.raises(InvalidInputError):
        apply_profile(config, ApplyOptions(profile_name="home", repo_path=repo, no_backup=True))

    result = apply_profile(
        config, ApplyOptions(profile_name="home", repo_path=repo, no_backup=True, force=True)
    )
    assert result.backup_name is None
    assert (repo / "CLAUDE.md").read_text(encoding="utf-8") == "home rules"


def test_clean_backs_up_and_removes_everything(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)
    _write(repo / "docs" / "CLAUDE.md", "docs rules")

    result = clean_repo(config, CleanOptions(repo_path=repo))

    assert result.files_removed == [".claude", "CLAUDE.md", "docs/CLAUDE.md"]
    for relative in result.files_removed:
        assert not (repo / relative).exists()
    storage = Storage(config)
    backups = storage.list_backups()
    assert [backup.name for backup in backups] == [result.backup_name]
    assert backups[0].file_count == 3
    state = storage.state.get(repo)
    assert state is not None
    assert state.backup_path == result.backup_name
    assert state.applied_profile is None


def test_clean_with_nothing_matched_is_a_no_op(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = tmp_path / "plain"
    _write(repo / "README.md")

    result = clean_repo(config, CleanOptions(repo_path=repo))

    assert result.files_removed == []
    assert result.backup_name is None
    assert Storage(config).list_backups() == []


def test_restore_after_clean_reproduces_files(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)
    before = _snapshot(repo)
    cleaned = clean_repo(config, CleanOptions(repo_path=repo))

    result = restore_repo(config, RestoreOptions(repo_path=repo))

    assert result.backup_name == cleaned.backup_name
    assert result.files_restored == [".claude/settings.json", "CLAUDE.md"]
    assert _snapshot(repo) == before
    assert Storage(config).state.get(repo) is None


def test_restore_after_apply_reports_previous_profile(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path)
    repo = _repo(tmp_path)
    before = _snapshot(repo)
    apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))

    result = restore_repo(config, RestoreOptions(repo_path=repo))

    assert result.previous_profile == "work"
    assert result.files_removed == [".cursor", "CLAUDE.md"]
    assert _snapshot(repo) == before


def test_restore_without_recorded_backup_is_invalid(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)

    with pytest.raises(InvalidInputError):
        restore_repo(config, RestoreOptions(repo_path=repo))
    with pytest.raises(NotFoundError):
        restore_repo(config, RestoreOptions(repo_path=repo, backup_name="project-missing"))


def test_diff_without_profile_needs_applied_one(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)

    with pytest.raises(InvalidInputError):
        diff_profile(config, DiffOptions(repo_path=repo))


def test_missing_repository_is_invalid(tmp_path: Path) -> None:
    config = _config(tmp_path)

    with pytest.raises(InvalidInputError):
        clean_repo(config, CleanOptions(repo_path=tmp_path / "missing"))


def test_dry_runs_do_not_mutate(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path)
    repo = _repo(tmp_path)
    clean_repo(config, CleanOptions(repo_path=repo, no_backup=True))
    _write(repo / "CLAUDE.md", "project rules")
    applied = apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))
    _write(repo / ".claude" / "local.json", "{}")
    store = tmp_path / "store"
    before = _snapshot(repo, store)

    apply_dry = apply_profile(
        config, ApplyOptions(profile_name="work", repo_path=repo, dry_run=True)
    )
    save_dry = save_profile(config, SaveOptions(as_name="other", repo_path=repo, dry_run=True))
    clean_dry = clean_repo(config, CleanOptions(repo_path=repo, dry_run=True))
    restore_dry = restore_repo(config, RestoreOptions(repo_path=repo, dry_run=True))

    assert _snapshot(repo, store) == before
    assert apply_dry.dry_run and apply_dry.backup_name is None
    assert apply_dry.files_removed == [".claude", ".cursor", "CLAUDE.md"]
    assert apply_dry.files_applied == applied.files_applied
    assert save_dry.files_saved == [".claude", ".cursor", "CLAUDE.md"]
    assert save_dry.is_new
    assert clean_dry.files_removed == [".claude", ".cursor", "CLAUDE.md"]
    assert restore_dry.backup_name == applied.backup_name
    assert restore_dry.files_removed == [".claude", ".cursor", "CLAUDE.md"]


def test_status_reports_changes_entries_and_backups(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path)
    repo = _repo(tmp_path)
    applied = apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))
    _write(repo / ".cursor" / "rules" / "extra.md", "extra")

    report = repo_status(config, repo)

    assert report.state is not None and report.state.applied_profile == "work"
    assert report.diff is not None
    assert report.diff.changes[0].path == ".cursor/rules/extra.md"
    assert report.diff.changes[0].kind == ChangeKind.ADDED
    assert [(entry.path, entry.is_dir, entry.file_count) for entry in report.entries] == [
        (".cursor", True, 2),
        ("CLAUDE.md", False, 1),
    ]
    assert [backup.name for backup in report.backups] == [applied.backup_name]
    assert not report.profile_missing


def test_status_flags_deleted_profile_and_unmatched_files(tmp_path: Path) -> None:
    config = _config(tmp_path)
    _make_profile(config, tmp_path)
    repo = _repo(tmp_path)
    apply_profile(config, ApplyOptions(profile_name="work", repo_path=repo))
    narrowed = config.model_copy(update={"ai_patterns": ["CLAUDE.md"]})

    report = repo_status(narrowed, repo)
    assert report.unmatched_profile_files == [".cursor/rules/style.md"]

    Storage(config).delete_profile("work")
    report = repo_status(config, repo)
    assert report.profile_missing
    assert report.diff is None


def _home_with_storage(tmp_path: Path) -> tuple[AipacaConfig, Path]:
    home = tmp_path / "home"
    config = AipacaConfig(storage=StorageSettings(path=str(home / ".aipaca")))
    config.bind_config_file(home / ".aipaca.yaml")
    Storage(config).init()
    _write(home / ".aipaca.yaml", "version: '1'")
    _write(home / "CLAUDE.md", "home rules")
    return config, home


def test_clean_in_directory_holding_storage_leaves_storage_alone(tmp_path: Path) -> None:
    config, home = _home_with_storage(tmp_path)
    _make_profile(config, tmp_path)

    dry = clean_repo(config, CleanOptions(repo_path=home, dry_run=True))
    assert dry.files_removed == ["CLAUDE.md"]

    result = clean_repo(config, CleanOptions(repo_path=home, no_backup=True))

    assert result.files_removed == ["CLAUDE.md"]
    assert not (home / "CLAUDE.md").exists()
    assert (home / ".aipaca.yaml").exists()
    assert [profile.name for profile in Storage(config).list_profiles()] == ["work"]

    _write(home / "CLAUDE.md", "home rules")
    backed_up = clean_repo(config, CleanOptions(repo_path=home))

    assert backed_up.backup_name is not None
    assert Storage(config).get_backup_files(backed_up.backup_name) == ["CLAUDE.md"]


def test_apply_in_directory_holding_storage_leaves_storage_alone(tmp_path: Path) -> None:
    config, home = _home_with_storage(tmp_path)
    _make_profile(config, tmp_path)

    result = apply_profile(config, ApplyOptions(profile_name="work", repo_path=home))

    assert result.files_removed == ["CLAUDE.md"]
    assert (home / "CLAUDE.md").read_text(encoding="utf-8") == "work rules"
    assert Storage(config).get_profile_files("work") == [".cursor/rules/style.md", "CLAUDE.md"]
    assert (home / ".aipaca.yaml").exists()
    assert not diff_profile(config, DiffOptions(repo_path=home)).has_changes


def test_save_then_diff_with_linked_directory_reports_no_changes(tmp_path: Path) -> None:
    config = _config(tmp_path)
    repo = _repo(tmp_path)
    _write(tmp_path / "shared" / "rule.md", "shared rule")
    (repo / ".claude" / "shared").symlink_to(tmp_path / "shared", target_is_directory=True)

    save_profile(config, SaveOptions(as_name="work", repo_path=repo))
    diff = diff_profile(config, DiffOptions(profile_name="work", repo_path=repo))

    assert diff.changes == []
    assert diff.undetermined == []
    assert Storage(config).get_profile_files("work") == [
        ".claude/settings.json",
        ".claude/shared/rule.md",
        "CLAUDE.md",
    ]
