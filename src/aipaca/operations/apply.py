"""Apply a stored profile to a repository."""

from __future__ import annotations

import logging

from aipaca.config.models import AipacaConfig
from aipaca.fileset import list_all_files
from aipaca.reconcile import diff_directory
from aipaca.storage import InvalidInputError, NotFoundError, Storage

from .common import remove_entries, resolve_repo_path
from .models import ApplyOptions, ApplyResult

LOGGER = logging.getLogger(__name__)


def apply_profile(config: AipacaConfig, options: ApplyOptions) -> ApplyResult:
    """Replace a repository's AI files with a profile's contents.

    The repository's current AI files are backed up (unless suppressed or
    there are none), removed, and the profile is copied in. The repository
    state then records the profile and backup. A dry run stops after
    discovery.

    Args:
        config: Loaded configuration.
        options: Apply options.

    Returns:
        ApplyResult: Files removed and applied, plus the backup created.

    Raises:
        NotFoundError: If the profile does not exist.
        InvalidInputError: If an unbacked apply would discard local edits
            and `force` is not set.
        StorageIOError: If a copy or removal fails part way; no rollback is attempted.
    """
    storage = Storage(config)
    repo_path = resolve_repo_path(options.repo_path)
    profile = storage.get_profile(options.profile_name)

    existing = storage.find_ai_files(repo_path)
    result = ApplyResult(
        profile_name=profile.name,
        repo_path=repo_path,
        files_applied=list_all_files(profile.path),
        files_removed=sorted(existing),
        dry_run=options.dry_run,
    )
    LOGGER.debug("Apply %s to %s: %d existing entries", profile.name, repo_path, len(existing))

    if options.no_backup and existing and not options.force:
        _guard_unsaved_edits(storage, repo_path, existing)

    if options.dry_run:
        return result

    if existing and not options.no_backup:
        result.backup_name = storage.create_backup(repo_path, file_set=existing)

    remove_entries(existing)
    storage.apply_profile(profile.name, repo_path)
    storage.state.record_apply(repo_path, profile.name, result.backup_name)
    return result


def _guard_unsaved_edits(storage: Storage, repo_path, existing) -> None:
    applied = storage.state.get_applied_profile(repo_path)
    if not applied:
        return
    try:
        reference = storage.get_profile(applied)
    except NotFoundError:
        return
    report = diff_directory(existing, reference.path)
    if report.has_changes:
        raise InvalidInputError(
            f"Repository has {len(report.changes)} unsaved change(s) to profile '{applied}' "
            "and --no-backup would discard them; save them first or pass --force."
        )


__all__ = ["apply_profile"]
