"""Restore a repository's AI files from a backup."""

from __future__ import annotations

from aipaca.config.models import AipacaConfig
from aipaca.fileset import list_all_files
from aipaca.storage import InvalidInputError, Storage

from .common import resolve_repo_path
from .models import RestoreOptions, RestoreResult


def restore_repo(config: AipacaConfig, options: RestoreOptions) -> RestoreResult:
    """Swap the repository's current AI files for a backup's contents.

    Restores the named backup, or the one recorded for the repository by the
    last apply or clean, then clears the repository state.

    Raises:
        InvalidInputError: If no backup is named and none is recorded.
        NotFoundError: If the backup does not exist.
        StorageIOError: If a removal or copy fails; no rollback is attempted.
    """
    storage = Storage(config)
    repo_path = resolve_repo_path(options.repo_path)

    backup_name = options.backup_name or storage.state.get_backup_for_repo(repo_path)
    if not backup_name:
        raise InvalidInputError(
            "No backup recorded for this repository; pass --backup to choose one."
        )

    backup = storage.get_backup(backup_name)
    existing = storage.find_ai_files(repo_path)
    result = RestoreResult(
        repo_path=repo_path,
        backup_name=backup.name,
        files_restored=list_all_files(backup.path),
        files_removed=sorted(existing),
        previous_profile=storage.state.get_applied_profile(repo_path),
        dry_run=options.dry_run,
    )
    if options.dry_run:
        return result

    storage.restore_backup(backup.name, repo_path, file_set=existing)
    storage.state.clear(repo_path)
    return result


__all__ = ["restore_repo"]
