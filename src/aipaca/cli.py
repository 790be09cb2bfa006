"""Command line interface for aipaca."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aipaca.config import AipacaConfig, ConfigError, ConfigManager
from aipaca.fileset import dir_checksum
from aipaca.operations import (
    ApplyOptions,
    CleanOptions,
    DiffOptions,
    RestoreOptions,
    SaveOptions,
    apply_profile,
    clean_repo,
    diff_profile,
    repo_status,
    restore_repo,
    save_profile,
)
from aipaca.operations.common import resolve_repo_path
from aipaca.reconcile import ChangeKind, FileChange
from aipaca.storage import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    StateError,
    Storage,
    StorageIOError,
)

console = Console()

LOGGER = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s: %(message)s"
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_DESCRIPTION_WIDTH = 40

_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (ConfigError, "config_error"),
    (NotFoundError, "not_found"),
    (AlreadyExistsError, "already_exists"),
    (InvalidInputError, "invalid_input"),
    (StorageIOError, "io_error"),
    (StateError, "state_error"),
    (click.ClickException, "cli_error"),
)

_CHANGE_MARKERS = {
    ChangeKind.ADDED: "[green]A[/green]",
    ChangeKind.REMOVED: "[red]D[/red]",
    ChangeKind.MODIFIED: "[yellow]M[/yellow]",
}


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _fail(exc: Exception, *, action: str, json_output: bool) -> None:
    """Route an exception raised by a command through `_handle_cli_error`.

    Known library and click errors keep their message; anything else is
    reported as an internal error naming the failed action.
    """
    for error_type, code in _ERROR_CODES:
        if isinstance(exc, error_type):
            message = exc.format_message() if isinstance(exc, click.ClickException) else str(exc)
            _handle_cli_error(message, code=code, json_output=json_output, original=exc)
            return

    LOGGER.debug("Unexpected error while %s", action, exc_info=True)
    _handle_cli_error(
        f"Unexpected error while {action}: {exc}",
        code="internal_error",
        json_output=json_output,
        details={"exception": type(exc).__name__},
        original=exc,
    )


def _emit_message(message: Any, *, mode: str, quiet: bool) -> None:
    """Conditionally print CLI output according to the quiet setting.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
    """

    if quiet and mode != "error":
        return

    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        root: Repository path relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {escape(parts)}.[/green]"


def _emit_file_list(header: str, files: list[str], marker: str, *, quiet: bool) -> None:
    if not files:
        return
    _emit_message(header, mode="detail", quiet=quiet)
    for path in files:
        _emit_message(f"  {marker} {escape(path)}", mode="detail", quiet=quiet)


def _emit_changes(changes: list[FileChange], *, quiet: bool) -> None:
    for change in changes:
        _emit_message(f"  {_CHANGE_MARKERS[change.kind]} {escape(change.path)}", mode="detail", quiet=quiet)


def _configure_logging(level_name: str, *, verbose: bool) -> None:
    """Configure the root logger for this invocation."""
    if verbose:
        level = logging.DEBUG
    else:
        resolved = logging.getLevelName(level_name.upper())
        level = resolved if isinstance(resolved, int) else logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger().setLevel(level)


def _config_manager(ctx: click.Context) -> ConfigManager:
    obj = ctx.find_root().obj or {}
    return ConfigManager(obj.get("config_path"))


def _load_config(ctx: click.Context) -> AipacaConfig:
    """Load the configuration for a command and apply its logging level.

    Raises:
        MissingConfigError: If `aipaca init` has not been run.
        ConfigError: If the configuration is invalid.
    """
    obj = ctx.find_root().obj or {}
    config = _config_manager(ctx).load()
    _configure_logging(config.logging.level, verbose=bool(obj.get("verbose")))
    return config


def _resolve_quiet(ctx: click.Context, config: AipacaConfig, *, json_output: bool, quiet: bool) -> bool:
    """Return whether quiet mode applies, honoring the configured default."""
    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    if json_output:
        return False
    return quiet if explicit_quiet else config.cli.quiet_default


def _check_output_flags(json_output: bool, quiet: bool) -> None:
    if json_output and quiet:
        raise click.ClickException("--json cannot be combined with --quiet.")


def _format_timestamp(value: Any) -> str:
    return value.strftime(_TIMESTAMP_FORMAT) if value is not None else "-"


_repo_argument = click.argument(
    "repo",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
_json_option = click.option("--json", "json_output", is_flag=True, help="Emit JSON output.")
_quiet_option = click.option("--quiet", is_flag=True, help="Suppress non-error output.")
_dry_run_option = click.option(
    "--dry-run", is_flag=True, help="Show what would happen without making changes."
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="aipaca")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default is ~/.aipaca.yaml).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """aipaca herds AI assistant config files across repositories.

    Apply stored profiles to a repository, save a repository's AI files back
    to storage, clean them out with a backup, and restore them later.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    if verbose:
        _configure_logging("DEBUG", verbose=True)


@cli.command()
@click.option(
    "--import",
    "import_current",
    is_flag=True,
    help="Import the current directory's AI files as the default profile.",
)
@click.pass_context
def init(ctx: click.Context, import_current: bool) -> None:
    """Create the configuration file and storage directories.

    An existing configuration file is kept as is.
    """
    try:
        manager = _config_manager(ctx)
        if manager.exists():
            console.print(f"[yellow]Config file already exists at {escape(str(manager.config_path))}.[/yellow]")
        else:
            manager.ensure_exists()
            console.print(f"[green]Created config file at {escape(str(manager.config_path))}.[/green]")
        config = _load_config(ctx)

        storage = Storage(config)
        root = storage.init()
        console.print(f"[green]Initialized storage at {escape(str(root))}.[/green]")

        if import_current:
            name = config.default_profile
            try:
                storage.save_to_profile(name, Path.cwd())
            except InvalidInputError:
                console.print("[yellow]No AI files found in current directory to import.[/yellow]")
            else:
                console.print(
                    f"[green]Imported AI files from current directory as '{escape(name)}' profile.[/green]"
                )
    except Exception as exc:
        _fail(exc, action="initializing aipaca", json_output=False)
        return

    console.print()
    console.print("aipaca is ready. Try these commands:")
    console.print("  aipaca status            # Check current state")
    console.print("  aipaca profiles list     # List available profiles")
    console.print("  aipaca apply <profile>   # Apply a profile")


@cli.command()
@click.argument("profile")
@_repo_argument
@_dry_run_option
@click.option("--no-backup", is_flag=True, help="Skip backing up the current AI files.")
@click.option("--force", is_flag=True, help="Apply even when unsaved edits would be lost.")
@_json_option
@_quiet_option
@click.pass_context
def apply(
    ctx: click.Context,
    profile: str,
    repo: Path | None,
    dry_run: bool,
    no_backup: bool,
    force: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Apply PROFILE to REPO (default: current directory).

    Existing AI files are backed up and removed, the profile's files are
    copied in, and the repository state is recorded.
    """
    try:
        _check_output_flags(json_output, quiet)
        config = _load_config(ctx)
        quiet_enabled = _resolve_quiet(ctx, config, json_output=json_output, quiet=quiet)

        result = apply_profile(
            config,
            ApplyOptions(
                profile_name=profile,
                repo_path=repo,
                dry_run=dry_run,
                no_backup=no_backup,
                force=force,
            ),
        )

        if json_output:
            console.print_json(data=result.model_dump(mode="json"))
            return

        if dry_run:
            _emit_message("[yellow]Dry run - no changes made.[/yellow]", mode="warning", quiet=quiet_enabled)
        _emit_file_list(
            "Would remove existing AI files:" if dry_run else "Removed existing AI files:",
            result.files_removed,
            "-",
            quiet=quiet_enabled,
        )
        _emit_file_list(
            f"Would apply from profile '{escape(result.profile_name)}':"
            if dry_run
            else f"Applied from profile '{escape(result.profile_name)}':",
            result.files_applied,
            "+",
            quiet=quiet_enabled,
        )
        if result.backup_name:
            _emit_message(
                f"[green]Created backup: {escape(result.backup_name)}[/green]", mode="detail", quiet=quiet_enabled
            )
        _emit_message(
            _format_summary_line(
                "Apply",
                result.repo_path,
                {
                    "profile": result.profile_name,
                    "applied": len(result.files_applied),
                    "removed": len(result.files_removed),
                    "dry_run": dry_run,
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
        )
    except Exception as exc:
        _fail(exc, action="applying profile", json_output=json_output)


@cli.command()
@click.argument("profile", required=False)
@_repo_argument
@click.option("--as", "as_name", type=str, help="Save as a new profile with this name.")
@_dry_run_option
@click.option("--force", is_flag=True, help="Overwrite an existing profile named by --as.")
@_json_option
@_quiet_option
@click.pass_context
def save(
    ctx: click.Context,
    profile: str | None,
    repo: Path | None,
    as_name: str | None,
    dry_run: bool,
    force: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Save REPO's AI files to PROFILE (default: the applied profile)."""
    try:
        _check_output_flags(json_output, quiet)
        config = _load_config(ctx)
        quiet_enabled = _resolve_quiet(ctx, config, json_output=json_output, quiet=quiet)

        result = save_profile(
            config,
            SaveOptions(
                profile_name=profile,
                as_name=as_name,
                repo_path=repo,
                dry_run=dry_run,
                force=force,
            ),
        )

        if json_output:
            console.print_json(data=result.model_dump(mode="json"))
            return

        if dry_run:
            _emit_message("[yellow]Dry run - no changes made.[/yellow]", mode="warning", quiet=quiet_enabled)
        _emit_file_list(
            f"Would save to profile '{escape(result.profile_name)}':"
            if dry_run
            else f"Saved to profile '{escape(result.profile_name)}':",
            result.files_saved,
            "+",
            quiet=quiet_enabled,
        )
        if not dry_run:
            label = "Created" if result.is_new else "Updated"
            _emit_message(
                f"[green]{label} profile '{escape(result.profile_name)}'.[/green]",
                mode="detail",
                quiet=quiet_enabled,
            )
        _emit_message(
            _format_summary_line(
                "Save",
                result.repo_path,
                {"profile": result.profile_name, "saved": len(result.files_saved), "dry_run": dry_run},
            ),
            mode="summary",
            quiet=quiet_enabled,
        )
    except Exception as exc:
        _fail(exc, action="saving profile", json_output=json_output)


@cli.command()
@_repo_argument
@_dry_run_option
@click.option("--no-backup", is_flag=True, help="Skip backing up the AI files before removal.")
@_json_option
@_quiet_option
@click.pass_context
def clean(
    ctx: click.Context,
    repo: Path | None,
    dry_run: bool,
    no_backup: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Remove all AI files from REPO, backing them up first."""
    try:
        _check_output_flags(json_output, quiet)
        config = _load_config(ctx)
        quiet_enabled = _resolve_quiet(ctx, config, json_output=json_output, quiet=quiet)

        result = clean_repo(config, CleanOptions(repo_path=repo, dry_run=dry_run, no_backup=no_backup))

        if json_output:
            console.print_json(data=result.model_dump(mode="json"))
            return

        if not result.files_removed:
            _emit_message("No AI files found to clean.", mode="detail", quiet=quiet_enabled)
            return
        if dry_run:
            _emit_message("[yellow]Dry run - no changes made.[/yellow]", mode="warning", quiet=quiet_enabled)
        _emit_file_list(
            "Would remove:" if dry_run else "Removed:",
            result.files_removed,
            "-",
            quiet=quiet_enabled,
        )
        if result.backup_name:
            _emit_message(
                f"[green]Created backup: {escape(result.backup_name)}[/green]", mode="detail", quiet=quiet_enabled
            )
        _emit_message(
            _format_summary_line(
                "Clean", result.repo_path, {"removed": len(result.files_removed), "dry_run": dry_run}
            ),
            mode="summary",
            quiet=quiet_enabled,
        )
    except Exception as exc:
        _fail(exc, action="cleaning repository", json_output=json_output)


@cli.command()
@_repo_argument
@click.option("--backup", "backup_name", type=str, help="Backup to restore (default: the recorded one).")
@_dry_run_option
@_json_option
@_quiet_option
@click.pass_context
def restore(
    ctx: click.Context,
    repo: Path | None,
    backup_name: str | None,
    dry_run: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Restore REPO's AI files from a backup."""
    try:
        _check_output_flags(json_output, quiet)
        config = _load_config(ctx)
        quiet_enabled = _resolve_quiet(ctx, config, json_output=json_output, quiet=quiet)

        result = restore_repo(
            config, RestoreOptions(repo_path=repo, backup_name=backup_name, dry_run=dry_run)
        )

        if json_output:
            console.print_json(data=result.model_dump(mode="json"))
            return

        if dry_run:
            _emit_message("[yellow]Dry run - no changes made.[/yellow]", mode="warning", quiet=quiet_enabled)
        if result.previous_profile:
            _emit_message(
                f"Replacing applied profile '{escape(result.previous_profile)}'.",
                mode="detail",
                quiet=quiet_enabled,
            )
        _emit_file_list(
            "Would remove current AI files:" if dry_run else "Removed current AI files:",
            result.files_removed,
            "-",
            quiet=quiet_enabled,
        )
        _emit_file_list(
            f"Would restore from backup '{escape(result.backup_name)}':"
            if dry_run
            else f"Restored from backup '{escape(result.backup_name)}':",
            result.files_restored,
            "+",
            quiet=quiet_enabled,
        )
        _emit_message(
            _format_summary_line(
                "Restore",
                result.repo_path,
                {
                    "backup": result.backup_name,
                    "restored": len(result.files_restored),
                    "removed": len(result.files_removed),
                    "dry_run": dry_run,
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
        )
    except Exception as exc:
        _fail(exc, action="restoring backup", json_output=json_output)


@cli.command()
@click.argument("profile", required=False)
@_repo_argument
@_json_option
@_quiet_option
@click.pass_context
def diff(
    ctx: click.Context,
    profile: str | None,
    repo: Path | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """Show how REPO's AI files differ from PROFILE (default: the applied profile)."""
    try:
        _check_output_flags(json_output, quiet)
        config = _load_config(ctx)
        quiet_enabled = _resolve_quiet(ctx, config, json_output=json_output, quiet=quiet)

        result = diff_profile(config, DiffOptions(profile_name=profile, repo_path=repo))

        if json_output:
            console.print_json(data=result.model_dump(mode="json"))
            return

        if result.has_changes:
            _emit_message(
                f"Changes relative to profile '{escape(result.profile_name)}':",
                mode="detail",
                quiet=quiet_enabled,
            )
            _emit_changes(result.changes, quiet=quiet_enabled)
        else:
            _emit_message(
                f"No differences from profile '{escape(result.profile_name)}'.",
                mode="detail",
                quiet=quiet_enabled,
            )
        for path in result.undetermined:
            _emit_message(
                f"[yellow]Could not compare {escape(path)}.[/yellow]", mode="warning", quiet=quiet_enabled
            )
    except Exception as exc:
        _fail(exc, action="comparing profile", json_output=json_output)


@cli.command()
@_repo_argument
@_json_option
@_quiet_option
@click.pass_context
def status(ctx: click.Context, repo: Path | None, json_output: bool, quiet: bool) -> None:
    """Show the applied profile, local changes, AI files, and backups of REPO."""
    try:
        _check_output_flags(json_output, quiet)
        config = _load_config(ctx)
        quiet_enabled = _resolve_quiet(ctx, config, json_output=json_output, quiet=quiet)

        report = repo_status(config, repo)

        if json_output:
            console.print_json(data=report.model_dump(mode="json"))
            return

        _emit_message(f"Repo: {escape(str(report.repo_path))}", mode="detail", quiet=quiet_enabled)
        state = report.state
        if state is not None and state.applied_profile:
            modified = " [yellow](modified)[/yellow]" if report.diff and report.diff.has_changes else ""
            _emit_message(
                f"Applied profile: [cyan]{escape(state.applied_profile)}[/cyan]{modified}",
                mode="detail",
                quiet=quiet_enabled,
            )
            _emit_message(
                f"Applied at: {_format_timestamp(state.applied_at)}", mode="detail", quiet=quiet_enabled
            )
            if state.backup_path:
                _emit_message(f"Backup: {escape(state.backup_path)}", mode="detail", quiet=quiet_enabled)
            if report.profile_missing:
                _emit_message(
                    f"[yellow]Profile '{escape(state.applied_profile)}' no longer exists in storage.[/yellow]",
                    mode="warning",
                    quiet=quiet_enabled,
                )
            if report.diff and report.diff.has_changes:
                _emit_message("Changes since apply:", mode="detail", quiet=quiet_enabled)
                _emit_changes(report.diff.changes, quiet=quiet_enabled)
            if report.unmatched_profile_files:
                _emit_message(
                    "[yellow]Profile files not matched by the configured patterns:[/yellow]",
                    mode="warning",
                    quiet=quiet_enabled,
                )
                for path in report.unmatched_profile_files:
                    _emit_message(f"  - {escape(path)}", mode="warning", quiet=quiet_enabled)
        else:
            _emit_message("No profile currently applied.", mode="detail", quiet=quiet_enabled)
            if state is not None and state.backup_path:
                _emit_message(f"Backup: {escape(state.backup_path)}", mode="detail", quiet=quiet_enabled)

        if report.entries:
            _emit_message("AI files in repo:", mode="detail", quiet=quiet_enabled)
            for entry in report.entries:
                label = f"{entry.path}/ ({entry.file_count} files)" if entry.is_dir else entry.path
                _emit_message(f"  {escape(label)}", mode="detail", quiet=quiet_enabled)
        else:
            _emit_message("No AI files in repo.", mode="detail", quiet=quiet_enabled)

        if report.backups:
            limit = max(0, config.cli.status_backup_limit)
            _emit_message(
                f"Available backups ({len(report.backups)}):", mode="detail", quiet=quiet_enabled
            )
            for backup in report.backups[:limit]:
                _emit_message(
                    f"  {escape(backup.name)} ({backup.file_count} files)", mode="detail", quiet=quiet_enabled
                )
            if len(report.backups) > limit:
                _emit_message(
                    f"  ... and {len(report.backups) - limit} more", mode="detail", quiet=quiet_enabled
                )
    except Exception as exc:
        _fail(exc, action="reading status", json_output=json_output)


@cli.group()
def profiles() -> None:
    """List and manage stored profiles."""


@profiles.command("list")
@click.pass_context
def profiles_list(ctx: click.Context) -> None:
    """List all profiles."""
    try:
        items = Storage(_load_config(ctx)).list_profiles()
    except Exception as exc:
        _fail(exc, action="listing profiles", json_output=False)
        return

    if not items:
        console.print("No profiles found.")
        console.print("Create one with: aipaca save --as <profile-name>")
        return

    table = Table(title="Profiles")
    table.add_column("Profile")
    table.add_column("Description")
    table.add_column("Files", justify="right")
    for item in items:
        description = item.description or "-"
        if len(description) > _DESCRIPTION_WIDTH:
            description = description[: _DESCRIPTION_WIDTH - 3] + "..."
        table.add_row(escape(item.name), escape(description), str(item.file_count))
    console.print(table)


@profiles.command("show")
@click.argument("name")
@click.pass_context
def profiles_show(ctx: click.Context, name: str) -> None:
    """Show the contents of profile NAME."""
    try:
        storage = Storage(_load_config(ctx))
        profile = storage.get_profile(name)
        files = storage.get_profile_files(name)
        checksum = dir_checksum(profile.path)
    except Exception as exc:
        _fail(exc, action="reading profile", json_output=False)
        return

    console.print(f"Profile: {escape(profile.name)}")
    if profile.description:
        console.print(f"Description: {escape(profile.description)}")
    console.print(f"Files: {profile.file_count}")
    console.print(f"Checksum: {checksum}")
    console.print("Contents:")
    for path in files:
        console.print(f"  {escape(path)}")


@profiles.command("delete")
@click.argument("name")
@click.pass_context
def profiles_delete(ctx: click.Context, name: str) -> None:
    """Delete profile NAME."""
    try:
        Storage(_load_config(ctx)).delete_profile(name)
    except Exception as exc:
        _fail(exc, action="deleting profile", json_output=False)
        return
    console.print(f"[green]Deleted profile '{escape(name)}'.[/green]")


@profiles.command("copy")
@click.argument("source")
@click.argument("destination")
@click.pass_context
def profiles_copy(ctx: click.Context, source: str, destination: str) -> None:
    """Copy profile SOURCE to a new profile DESTINATION."""
    try:
        Storage(_load_config(ctx)).copy_profile(source, destination)
    except Exception as exc:
        _fail(exc, action="copying profile", json_output=False)
        return
    console.print(f"[green]Copied profile '{escape(source)}' to '{escape(destination)}'.[/green]")


@cli.group()
def backups() -> None:
    """List and manage backups."""


_backup_repo_option = click.option(
    "--repo",
    "repo",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Only consider backups taken from this repository.",
)


@backups.command("list")
@_backup_repo_option
@click.pass_context
def backups_list(ctx: click.Context, repo: Path | None) -> None:
    """List backups, newest first."""
    try:
        storage = Storage(_load_config(ctx))
        items = (
            storage.get_backups_for_repo(resolve_repo_path(repo))
            if repo is not None
            else storage.list_backups()
        )
    except Exception as exc:
        _fail(exc, action="listing backups", json_output=False)
        return

    if not items:
        console.print("No backups found.")
        return

    table = Table(title="Backups")
    table.add_column("Backup")
    table.add_column("Files", justify="right")
    table.add_column("Created")
    for item in items:
        table.add_row(escape(item.name), str(item.file_count), _format_timestamp(item.created_at))
    console.print(table)


@backups.command("show")
@click.argument("name")
@click.pass_context
def backups_show(ctx: click.Context, name: str) -> None:
    """Show the contents of backup NAME."""
    try:
        storage = Storage(_load_config(ctx))
        backup = storage.get_backup(name)
        files = storage.get_backup_files(name)
        checksum = dir_checksum(backup.path)
    except Exception as exc:
        _fail(exc, action="reading backup", json_output=False)
        return

    console.print(f"Backup: {escape(backup.name)}")
    if backup.created_at is not None:
        console.print(f"Created: {_format_timestamp(backup.created_at)}")
    console.print(f"Files: {backup.file_count}")
    console.print(f"Checksum: {checksum}")
    console.print("Contents:")
    for path in files:
        console.print(f"  {escape(path)}")


@backups.command("delete")
@click.argument("name")
@click.pass_context
def backups_delete(ctx: click.Context, name: str) -> None:
    """Delete backup NAME."""
    try:
        Storage(_load_config(ctx)).delete_backup(name)
    except Exception as exc:
        _fail(exc, action="deleting backup", json_output=False)
        return
    console.print(f"[green]Deleted backup '{escape(name)}'.[/green]")


@backups.command("prune")
@click.option("--keep", type=int, default=None, help="Number of recent backups to keep.")
@_backup_repo_option
@click.pass_context
def backups_prune(ctx: click.Context, keep: int | None, repo: Path | None) -> None:
    """Delete old backups, keeping the most recent ones."""
    try:
        config = _load_config(ctx)
        keep_count = keep if keep is not None else config.cli.prune_keep_default
        result = Storage(config).prune_backups(
            keep_count, resolve_repo_path(repo) if repo is not None else None
        )
    except Exception as exc:
        _fail(exc, action="pruning backups", json_output=False)
        return

    if not result.deleted and not result.failed:
        console.print(
            f"Nothing to prune (have {len(result.kept)} backups, keeping {keep_count})."
        )
        return

    for name in result.deleted:
        console.print(f"  - {escape(name)}")
    for name, reason in result.failed.items():
        console.print(f"[yellow]Failed to delete {escape(name)}: {escape(reason)}[/yellow]")
    console.print(f"[green]Pruned {len(result.deleted)} backup(s), kept {len(result.kept)}.[/green]")
    if result.failed:
        raise click.ClickException(f"{len(result.failed)} backup(s) could not be deleted.")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
