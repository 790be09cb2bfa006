"""Storage data models."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Profile(BaseModel):
    """A named bundle of AI configuration files held in storage."""

    name: str
    path: Path
    description: str = ""
    file_count: int = 0


class Backup(BaseModel):
    """A timestamped snapshot of a repository's AI files.

    Attributes:
        name: Directory name, `<repo>-<YYYY-MM-DD-HHMMSS>` with an optional
            `-N` collision suffix.
        path: Absolute location of the backup directory.
        created_at: Timestamp parsed from the name, if it can be.
        file_count: Number of files held in the backup.
    """

    name: str
    path: Path
    created_at: Optional[datetime] = None
    file_count: int = 0


class RepoState(BaseModel):
    """What aipaca last did to a repository.

    Attributes:
        applied_profile: Profile currently applied, if any.
        applied_at: When the profile was applied.
        backup_path: Name of the backup that restores the repository.
    """

    applied_profile: Optional[str] = None
    applied_at: Optional[datetime] = None
    backup_path: Optional[str] = None


class PruneResult(BaseModel):
    """Outcome of pruning old backups."""

    kept: List[str] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict)


class StateFile(BaseModel):
    """On-disk record of every known repository keyed by absolute path."""

    repos: Dict[str, RepoState] = Field(default_factory=dict)


__all__ = ["Backup", "Profile", "PruneResult", "RepoState", "StateFile"]
