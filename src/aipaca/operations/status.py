"""Summarize what aipaca knows about a repository."""

from __future__ import annotations

import logging
from pathlib import Path

from aipaca.config.models import AipacaConfig
from aipaca.fileset import count_files, is_ai_file, list_all_files
from aipaca.reconcile import diff_directory
from aipaca.storage import NotFoundError, Storage

from .common import resolve_repo_path
from .models import DiffResult, StatusEntry, StatusReport

LOGGER = logging.getLogger(__name__)


def repo_status(config: AipacaConfig, repo_path: Path | str | None = None) -> StatusReport:
    """Collect state, local changes, AI entries, and backups for a repository.

    A recorded profile that has since been deleted from storage is reported
    through `profile_missing` rather than raised.
    """
    storage = Storage(config)
    repo = resolve_repo_path(repo_path)
    entries = storage.find_ai_files(repo)

    report = StatusReport(repo_path=repo, state=storage.state.get(repo))
    applied = report.state.applied_profile if report.state else None
    if applied:
        try:
            profile = storage.get_profile(applied)
        except NotFoundError:
            LOGGER.info("Applied profile %s no longer exists", applied)
            report.profile_missing = True
        else:
            diff = diff_directory(entries, profile.path)
            report.diff = DiffResult(
                profile_name=profile.name,
                repo_path=repo,
                changes=diff.changes,
                undetermined=diff.undetermined,
                has_changes=diff.has_changes,
            )
            report.unmatched_profile_files = [
                path for path in list_all_files(profile.path) if not is_ai_file(path, config.ai_patterns)
            ]

    for relative, absolute in entries.items():
        is_dir = absolute.is_dir()
        report.entries.append(
            StatusEntry(
                path=relative,
                is_dir=is_dir,
                file_count=count_files(absolute) if is_dir else 1,
            )
        )

    report.backups = storage.get_backups_for_repo(repo)
    return report


__all__ = ["repo_status"]
