"""Save a repository's AI files to a profile."""

from __future__ import annotations

from aipaca.config.models import AipacaConfig
from aipaca.storage import AlreadyExistsError, InvalidInputError, Storage

from .common import resolve_repo_path
from .models import SaveOptions, SaveResult


def save_profile(config: AipacaConfig, options: SaveOptions) -> SaveResult:
    """Copy the repository's AI files into a profile, replacing its contents.

    The target is `as_name` when given, else `profile_name`, else the profile
    currently applied to the repository.

    Raises:
        InvalidInputError: If no target can be determined or the repository
            holds no AI files.
        AlreadyExistsError: If `as_name` names an existing profile and `force` is unset.
        StorageIOError: If clearing or copying the profile fails.
    """
    storage = Storage(config)
    repo_path = resolve_repo_path(options.repo_path)

    profile_name = options.as_name or options.profile_name
    if not profile_name:
        profile_name = storage.state.get_applied_profile(repo_path)
        if not profile_name:
            raise InvalidInputError(
                "No profile specified and no profile currently applied to this repository."
            )

    exists = storage.profile_exists(profile_name)
    if options.as_name and exists and not options.force:
        raise AlreadyExistsError(
            f"Profile '{profile_name}' already exists (use --force to overwrite)."
        )

    entries = storage.find_ai_files(repo_path)
    if not entries:
        raise InvalidInputError(f"No AI files found in repository {repo_path}.")

    result = SaveResult(
        profile_name=profile_name,
        repo_path=repo_path,
        files_saved=sorted(entries),
        is_new=not exists,
        dry_run=options.dry_run,
    )
    if options.dry_run:
        return result

    storage.save_to_profile(profile_name, repo_path, file_set=entries)
    return result


__all__ = ["save_profile"]
