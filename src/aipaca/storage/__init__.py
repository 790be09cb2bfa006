"""Storage of profiles, backups, and per-repository state."""

from __future__ import annotations

from .errors import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    StateError,
    StorageError,
    StorageIOError,
)
from .models import Backup, Profile, PruneResult, RepoState, StateFile
from .state import STATE_FILENAME, StateRepository
from .store import BACKUP_TIMESTAMP_FORMAT, Storage, backup_repo_name, parse_backup_timestamp

__all__ = [
    "AlreadyExistsError",
    "BACKUP_TIMESTAMP_FORMAT",
    "Backup",
    "InvalidInputError",
    "NotFoundError",
    "Profile",
    "PruneResult",
    "RepoState",
    "STATE_FILENAME",
    "StateError",
    "StateFile",
    "StateRepository",
    "Storage",
    "StorageError",
    "StorageIOError",
    "backup_repo_name",
    "parse_backup_timestamp",
]
