"""Per-repository state persistence."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import StateError
from .models import RepoState, StateFile

LOGGER = logging.getLogger(__name__)

STATE_FILENAME = "repo-states.yaml"


class StateRepository:
    """Manage the record mapping repository paths to their applied state.

    The whole record is read and rewritten on every update. Keys are absolute
    repository paths; entries for repositories that no longer exist are kept
    and never treated as errors.
    """

    def __init__(self, state_dir: Path) -> None:
        """Initialize the repository.

        Args:
            state_dir: Directory holding the state record.
        """
        self._state_dir = Path(state_dir)

    @property
    def state_file(self) -> Path:
        """Return the path of the state record."""
        return self._state_dir / STATE_FILENAME

    def get(self, repo_path: Path) -> RepoState | None:
        """Return the state for a repository, or None when nothing is recorded.

        Raises:
            StateError: If the record cannot be read or parsed.
        """
        return self._load().repos.get(_key(repo_path))

    def set(self, repo_path: Path, state: RepoState | None) -> None:
        """Store `state` for a repository; None removes the entry.

        Raises:
            StateError: If the record cannot be read or written.
        """
        record = self._load()
        key = _key(repo_path)
        if state is None:
            record.repos.pop(key, None)
        else:
            record.repos[key] = state
        self._save(record)

    def clear(self, repo_path: Path) -> None:
        """Forget everything recorded for a repository."""
        self.set(repo_path, None)

    def record_apply(self, repo_path: Path, profile_name: str, backup_name: str | None) -> RepoState:
        """Record that `profile_name` was applied to a repository just now."""
        state = RepoState(
            applied_profile=profile_name,
            applied_at=datetime.now(timezone.utc),
            backup_path=backup_name or None,
        )
        self.set(repo_path, state)
        return state

    def get_applied_profile(self, repo_path: Path) -> str | None:
        state = self.get(repo_path)
        return state.applied_profile if state else None

    def get_backup_for_repo(self, repo_path: Path) -> str | None:
        state = self.get(repo_path)
        return state.backup_path if state else None

    def _load(self) -> StateFile:
        path = self.state_file
        if not path.exists():
            return StateFile()
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except OSError as exc:
            raise StateError(f"Failed to read state file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise StateError(f"Failed to parse state file {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StateError(f"State file {path} must contain a mapping.")
        repos = raw.get("repos") or {}
        if not isinstance(repos, dict):
            raise StateError(f"State file {path} has an invalid 'repos' section.")
        try:
            return StateFile.model_validate(
                {"repos": {key: value or {} for key, value in repos.items()}}
            )
        except ValidationError as exc:
            raise StateError(f"Invalid state data in {path}: {exc}") from exc

    def _save(self, record: StateFile) -> None:
        path = self.state_file
        payload = {
            "repos": {
                key: state.model_dump(mode="json", exclude_none=True)
                for key, state in sorted(record.repos.items())
            }
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    yaml.safe_dump(payload, handle, sort_keys=False)
                os.replace(tmp_name, path)
            except Exception:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StateError(f"Failed to write state file {path}: {exc}") from exc
        LOGGER.debug("Wrote %d repository state(s) to %s", len(payload["repos"]), path)


def _key(repo_path: Path) -> str:
    return os.path.abspath(repo_path)


__all__ = ["STATE_FILENAME", "StateRepository"]
