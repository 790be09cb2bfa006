"""Option and result models for the repository operations."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from aipaca.reconcile.models import FileChange
from aipaca.storage.models import Backup, RepoState


class ApplyOptions(BaseModel):
    """Inputs for applying a profile.

    Attributes:
        profile_name: Profile to apply.
        repo_path: Target repository; defaults to the working directory.
        dry_run: Report what would happen without touching anything.
        no_backup: Skip backing up the repository's current AI files.
        force: Allow an unbacked apply over local edits to the applied profile.
    """

    profile_name: str
    repo_path: Optional[Path] = None
    dry_run: bool = False
    no_backup: bool = False
    force: bool = False


class ApplyResult(BaseModel):
    profile_name: str
    repo_path: Path
    backup_name: Optional[str] = None
    files_applied: List[str] = Field(default_factory=list)
    files_removed: List[str] = Field(default_factory=list)
    dry_run: bool = False


class SaveOptions(BaseModel):
    """Inputs for saving a repository's AI files to a profile.

    Attributes:
        profile_name: Existing profile to update; defaults to the applied one.
        as_name: Save as a new profile under this name instead.
        repo_path: Source repository; defaults to the working directory.
        dry_run: Report what would happen without touching anything.
        force: Overwrite an existing profile named by `as_name`.
    """

    profile_name: Optional[str] = None
    as_name: Optional[str] = None
    repo_path: Optional[Path] = None
    dry_run: bool = False
    force: bool = False


class SaveResult(BaseModel):
    profile_name: str
    repo_path: Path
    files_saved: List[str] = Field(default_factory=list)
    is_new: bool = False
    dry_run: bool = False


class CleanOptions(BaseModel):
    repo_path: Optional[Path] = None
    dry_run: bool = False
    no_backup: bool = False


class CleanResult(BaseModel):
    repo_path: Path
    backup_name: Optional[str] = None
    files_removed: List[str] = Field(default_factory=list)
    dry_run: bool = False


class RestoreOptions(BaseModel):
    """Inputs for restoring a backup.

    Attributes:
        repo_path: Target repository; defaults to the working directory.
        backup_name: Backup to restore; defaults to the one recorded for the repository.
        dry_run: Report what would happen without touching anything.
    """

    repo_path: Optional[Path] = None
    backup_name: Optional[str] = None
    dry_run: bool = False


class RestoreResult(BaseModel):
    repo_path: Path
    backup_name: str
    files_restored: List[str] = Field(default_factory=list)
    files_removed: List[str] = Field(default_factory=list)
    previous_profile: Optional[str] = None
    dry_run: bool = False


class DiffOptions(BaseModel):
    profile_name: Optional[str] = None
    repo_path: Optional[Path] = None


class DiffResult(BaseModel):
    """Differences between a repository and a profile.

    Attributes:
        profile_name: Profile compared against.
        repo_path: Repository compared.
        changes: Added, removed, and modified paths sorted by path.
        undetermined: Paths whose contents could not be read for comparison.
        has_changes: Whether any change was found.
    """

    profile_name: str
    repo_path: Path
    changes: List[FileChange] = Field(default_factory=list)
    undetermined: List[str] = Field(default_factory=list)
    has_changes: bool = False


class StatusEntry(BaseModel):
    """One top-level AI entry present in a repository."""

    path: str
    is_dir: bool = False
    file_count: int = 1


class StatusReport(BaseModel):
    """Everything `aipaca status` reports about a repository.

    Attributes:
        repo_path: Repository inspected.
        state: Recorded state, if any.
        diff: Differences against the applied profile, when one is applied and still stored.
        profile_missing: The recorded profile no longer exists in storage.
        unmatched_profile_files: Files of the applied profile that the current
            patterns would not pick up from the repository.
        entries: AI entries currently in the repository.
        backups: Backups taken from a repository with the same directory name, newest first.
    """

    repo_path: Path
    state: Optional[RepoState] = None
    diff: Optional[DiffResult] = None
    profile_missing: bool = False
    unmatched_profile_files: List[str] = Field(default_factory=list)
    entries: List[StatusEntry] = Field(default_factory=list)
    backups: List[Backup] = Field(default_factory=list)


__all__ = [
    "ApplyOptions",
    "ApplyResult",
    "CleanOptions",
    "CleanResult",
    "DiffOptions",
    "DiffResult",
    "RestoreOptions",
    "RestoreResult",
    "SaveOptions",
    "SaveResult",
    "StatusEntry",
    "StatusReport",
]
