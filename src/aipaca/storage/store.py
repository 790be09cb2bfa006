"""Profile and backup storage rooted in the configured storage directory."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Mapping

from aipaca.config.models import AipacaConfig
from aipaca.fileset import (
    copy_path,
    count_files,
    find_ai_files,
    list_all_files,
    list_top_level,
    remove_path,
)

from .errors import AlreadyExistsError, InvalidInputError, NotFoundError, StorageIOError
from .models import Backup, Profile, PruneResult
from .state import StateRepository

LOGGER = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d-%H%M%S"
_BACKUP_SUFFIX = re.compile(r"-(\d{4}-\d{2}-\d{2}-\d{6})(?:-(\d+))?$")


class Storage:
    """Access profiles, backups, and repository state under one storage root.

    A single instance is built per invocation from the loaded configuration
    and handed to whichever operation needs it.
    """

    def __init__(self, config: AipacaConfig) -> None:
        self._config = config
        self.state = StateRepository(config.state_path)

    @property
    def config(self) -> AipacaConfig:
        return self._config

    @property
    def root(self) -> Path:
        return self._config.storage_root

    # Layout -------------------------------------------------------------

    def init(self) -> Path:
        """Create the storage directory structure and return its root."""
        for directory in (
            self.root,
            self._config.profiles_path,
            self._config.backups_path,
            self._config.state_path,
        ):
            _destructive(_make_dir, directory, action=f"create storage directory {directory}")
        return self.root

    def profile_path(self, name: str) -> Path:
        _validate_name("profile", name)
        return self._config.profiles_path / name

    def backup_path(self, name: str) -> Path:
        _validate_name("backup", name)
        return self._config.backups_path / name

    def profile_exists(self, name: str) -> bool:
        return self.profile_path(name).is_dir()

    def find_ai_files(self, repo_path: Path) -> dict[str, Path]:
        """Return the repository's AI file set, never including aipaca's own files."""
        return find_ai_files(repo_path, self._config.ai_patterns, exclude=self._config.reserved_paths)

    # Profiles -----------------------------------------------------------

    def list_profiles(self) -> list[Profile]:
        """Return every stored profile sorted by name."""
        directory = self._config.profiles_path
        if not directory.is_dir():
            return []
        return [
            self._profile(entry.name, entry)
            for entry in sorted(directory.iterdir(), key=lambda item: item.name)
            if entry.is_dir()
        ]

    def get_profile(self, name: str) -> Profile:
        """Return a stored profile.

        Raises:
            NotFoundError: If no profile directory exists for `name`.
        """
        path = self.profile_path(name)
        if not path.exists():
            raise NotFoundError(f"Profile '{name}' not found.")
        if not path.is_dir():
            raise InvalidInputError(f"Profile '{name}' is not a directory.")
        return self._profile(name, path)

    def get_profile_files(self, name: str) -> list[str]:
        return list_all_files(self.get_profile(name).path)

    def delete_profile(self, name: str) -> None:
        path = self.get_profile(name).path
        _destructive(remove_path, path, action=f"delete profile '{name}'")
        LOGGER.info("Deleted profile %s", name)

    def copy_profile(self, source: str, destination: str) -> Profile:
        """Duplicate a profile under a new name.

        Raises:
            NotFoundError: If `source` does not exist.
            AlreadyExistsError: If `destination` already exists.
        """
        source_path = self.profile_path(source)
        destination_path = self.profile_path(destination)
        if not source_path.is_dir():
            raise NotFoundError(f"Source profile '{source}' not found.")
        if destination_path.exists():
            raise AlreadyExistsError(f"Destination profile '{destination}' already exists.")
        _destructive(copy_path, source_path, destination_path, action=f"copy profile '{source}'")
        return self._profile(destination, destination_path)

    def save_to_profile(
        self,
        name: str,
        repo_path: Path,
        *,
        file_set: Mapping[str, Path] | None = None,
    ) -> list[str]:
        """Replace a profile's contents with the repository's AI files.

        Args:
            name: Profile to create or overwrite.
            repo_path: Repository to read from.
            file_set: Pre-computed AI file set for `repo_path`, if available.

        Returns:
            list[str]: Saved top-level relative paths.

        Raises:
            InvalidInputError: If the repository holds no AI files.
            StorageIOError: If clearing or copying fails.
        """
        profile_path = self.profile_path(name)
        entries = dict(file_set) if file_set is not None else self.find_ai_files(repo_path)
        if not entries:
            raise InvalidInputError(f"No AI files found in repository {repo_path}.")

        if profile_path.exists():
            _destructive(remove_path, profile_path, action=f"clear profile '{name}'")
        _destructive(_make_dir, profile_path, action=f"create profile '{name}'")
        for relative, absolute in entries.items():
            _destructive(copy_path, absolute, profile_path / relative, action=f"copy {relative}")
        LOGGER.info("Saved %d entries from %s to profile %s", len(entries), repo_path, name)
        return sorted(entries)

    def apply_profile(self, name: str, repo_path: Path) -> list[str]:
        """Copy a profile's top-level entries into a repository.

        Returns:
            list[str]: Every file written, relative to the repository.
        """
        profile = self.get_profile(name)
        files = list_all_files(profile.path)
        for entry in list_top_level(profile.path):
            _destructive(copy_path, profile.path / entry, Path(repo_path) / entry, action=f"apply {entry}")
        LOGGER.info("Applied profile %s to %s", name, repo_path)
        return files

    # Backups ------------------------------------------------------------

    def list_backups(self) -> list[Backup]:
        """Return every backup, newest first."""
        directory = self._config.backups_path
        if not directory.is_dir():
            return []
        backups = [self._backup(entry.name, entry) for entry in directory.iterdir() if entry.is_dir()]
        return _newest_first(backups)

    def get_backup(self, name: str) -> Backup:
        """Return a stored backup.

        Raises:
            NotFoundError: If no backup directory exists for `name`.
        """
        path = self.backup_path(name)
        if not path.exists():
            raise NotFoundError(f"Backup '{name}' not found.")
        if not path.is_dir():
            raise InvalidInputError(f"Backup '{name}' is not a directory.")
        return self._backup(name, path)

    def get_backup_files(self, name: str) -> list[str]:
        return list_all_files(self.get_backup(name).path)

    def get_backups_for_repo(self, repo_path: Path) -> list[Backup]:
        """Return the backups whose names derive from the repository's directory name."""
        repo_name = Path(repo_path).name
        return [backup for backup in self.list_backups() if backup_repo_name(backup.name) == repo_name]

    def create_backup(
        self,
        repo_path: Path,
        *,
        file_set: Mapping[str, Path] | None = None,
        now: datetime | None = None,
    ) -> str | None:
        """Copy the repository's AI files into a new backup.

        Args:
            repo_path: Repository to back up.
            file_set: Pre-computed AI file set for `repo_path`, if available.
            now: Timestamp used for the backup name; defaults to local time.

        Returns:
            str | None: The new backup's name, or None when nothing matched.

        Raises:
            StorageIOError: If copying fails; the partial backup is removed.
        """
        entries = dict(file_set) if file_set is not None else self.find_ai_files(repo_path)
        if not entries:
            return None

        name = self._unique_backup_name(Path(repo_path).name, now or datetime.now())
        backup_path = self.backup_path(name)
        _destructive(_make_dir, backup_path, action=f"create backup '{name}'")
        for relative, absolute in entries.items():
            try:
                copy_path(absolute, backup_path / relative)
            except OSError as exc:
                try:
                    remove_path(backup_path)
                except OSError as cleanup_exc:
                    LOGGER.warning("Could not remove partial backup %s: %s", backup_path, cleanup_exc)
                raise StorageIOError(f"Failed to back up {relative}: {exc}") from exc
        LOGGER.info("Created backup %s with %d entries", name, len(entries))
        return name

    def restore_backup(
        self,
        name: str,
        repo_path: Path,
        *,
        file_set: Mapping[str, Path] | None = None,
    ) -> list[str]:
        """Replace the repository's AI files with a backup's contents.

        Returns:
            list[str]: Every file restored, relative to the repository.

        Raises:
            NotFoundError: If the backup does not exist.
            StorageIOError: If removing or copying fails; nothing is rolled back.
        """
        backup = self.get_backup(name)
        files = list_all_files(backup.path)
        current = dict(file_set) if file_set is not None else self.find_ai_files(repo_path)
        for relative, absolute in current.items():
            _destructive(remove_path, absolute, action=f"remove {relative}")
        for entry in list_top_level(backup.path):
            _destructive(copy_path, backup.path / entry, Path(repo_path) / entry, action=f"restore {entry}")
        LOGGER.info("Restored backup %s into %s", name, repo_path)
        return files

    def delete_backup(self, name: str) -> None:
        path = self.get_backup(name).path
        _destructive(remove_path, path, action=f"delete backup '{name}'")
        LOGGER.info("Deleted backup %s", name)

    def prune_backups(self, keep: int, repo_path: Path | None = None) -> PruneResult:
        """Delete all but the `keep` newest backups, optionally for one repository.

        Failures to delete an individual backup are collected, not raised.
        """
        if keep < 0:
            raise InvalidInputError("--keep must be zero or greater.")
        backups = (
            self.get_backups_for_repo(repo_path) if repo_path is not None else self.list_backups()
        )
        result = PruneResult(kept=[backup.name for backup in backups[:keep]])
        for backup in backups[keep:]:
            try:
                remove_path(backup.path)
            except OSError as exc:
                LOGGER.warning("Failed to delete backup %s: %s", backup.name, exc)
                result.failed[backup.name] = str(exc)
                continue
            result.deleted.append(backup.name)
        return result

    # Internal helpers ---------------------------------------------------

    def _profile(self, name: str, path: Path) -> Profile:
        return Profile(
            name=name,
            path=path,
            description=self._config.profile_descriptions.get(name, ""),
            file_count=_safe_count(path),
        )

    def _backup(self, name: str, path: Path) -> Backup:
        return Backup(
            name=name,
            path=path,
            created_at=parse_backup_timestamp(name),
            file_count=_safe_count(path),
        )

    def _unique_backup_name(self, repo_name: str, now: datetime) -> str:
        base = f"{repo_name}-{now.strftime(BACKUP_TIMESTAMP_FORMAT)}"
        candidate = base
        counter = 2
        while self.backup_path(candidate).exists():
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate


def parse_backup_timestamp(name: str) -> datetime | None:
    """Return the timestamp encoded in a backup name, if any."""
    match = _BACKUP_SUFFIX.search(name)
    if match is None:
        return None
    try:
        return datetime.strptime(match.group(1), BACKUP_TIMESTAMP_FORMAT)
    except ValueError:
        return None


def backup_repo_name(name: str) -> str | None:
    """Return the repository directory name a backup was taken from."""
    match = _BACKUP_SUFFIX.search(name)
    if match is None:
        return None
    return name[: match.start()]


def _newest_first(backups: list[Backup]) -> list[Backup]:
    def _sort_key(backup: Backup) -> tuple[datetime, int, str]:
        match = _BACKUP_SUFFIX.search(backup.name)
        sequence = int(match.group(2)) if match and match.group(2) else 1
        return (backup.created_at or datetime.min, sequence, backup.name)

    return sorted(backups, key=_sort_key, reverse=True)


def _safe_count(path: Path) -> int:
    try:
        return count_files(path)
    except OSError as exc:
        LOGGER.debug("Could not count files in %s: %s", path, exc)
        return 0


def _validate_name(kind: str, name: str) -> None:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidInputError(f"Invalid {kind} name: {name!r}")


def _destructive(func, *args, action: str) -> None:
    try:
        func(*args)
    except OSError as exc:
        raise StorageIOError(f"Failed to {action}: {exc}") from exc


def _make_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


__all__ = [
    "BACKUP_TIMESTAMP_FORMAT",
    "Storage",
    "backup_repo_name",
    "parse_backup_timestamp",
]
