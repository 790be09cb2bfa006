"""Remove AI files from a repository."""

from __future__ import annotations

from aipaca.config.models import AipacaConfig
from aipaca.storage import RepoState, Storage

from .common import remove_entries, resolve_repo_path
from .models import CleanOptions, CleanResult


def clean_repo(config: AipacaConfig, options: CleanOptions) -> CleanResult:
    """Back up and delete every AI file in a repository.

    With a backup, the repository state is replaced by one that only names the
    backup, so `restore` can bring the files back. Nothing matched is a no-op.
    """
    storage = Storage(config)
    repo_path = resolve_repo_path(options.repo_path)

    entries = storage.find_ai_files(repo_path)
    result = CleanResult(repo_path=repo_path, files_removed=sorted(entries), dry_run=options.dry_run)
    if not entries or options.dry_run:
        return result

    if not options.no_backup:
        result.backup_name = storage.create_backup(repo_path, file_set=entries)
        storage.state.set(repo_path, RepoState(backup_path=result.backup_name))

    remove_entries(entries)
    return result


__all__ = ["clean_repo"]
