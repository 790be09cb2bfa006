"""Compare a repository's AI files with a profile."""

from __future__ import annotations

from aipaca.config.models import AipacaConfig
from aipaca.reconcile import diff_directory
from aipaca.storage import InvalidInputError, Storage

from .common import resolve_repo_path
from .models import DiffOptions, DiffResult


def diff_profile(config: AipacaConfig, options: DiffOptions) -> DiffResult:
    """Report added, removed, and modified files relative to a profile.

    Compares against `profile_name`, or the profile applied to the repository.

    Raises:
        InvalidInputError: If no profile is named and none is applied.
        NotFoundError: If the profile does not exist.
    """
    storage = Storage(config)
    repo_path = resolve_repo_path(options.repo_path)

    profile_name = options.profile_name or storage.state.get_applied_profile(repo_path)
    if not profile_name:
        raise InvalidInputError(
            "No profile specified and no profile currently applied to this repository."
        )
    profile = storage.get_profile(profile_name)

    report = diff_directory(storage.find_ai_files(repo_path), profile.path)
    return DiffResult(
        profile_name=profile.name,
        repo_path=repo_path,
        changes=report.changes,
        undetermined=report.undetermined,
        has_changes=report.has_changes,
    )


__all__ = ["diff_profile"]
