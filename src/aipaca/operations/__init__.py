"""Repository operations: apply, save, clean, restore, diff, and status."""

from .apply import apply_profile
from .clean import clean_repo
from .diff import diff_profile
from .models import (
    ApplyOptions,
    ApplyResult,
    CleanOptions,
    CleanResult,
    DiffOptions,
    DiffResult,
    RestoreOptions,
    RestoreResult,
    SaveOptions,
    SaveResult,
    StatusEntry,
    StatusReport,
)
from .restore import restore_repo
from .save import save_profile
from .status import repo_status

__all__ = [
    "ApplyOptions",
    "ApplyResult",
    "CleanOptions",
    "CleanResult",
    "DiffOptions",
    "DiffResult",
    "RestoreOptions",
    "RestoreResult",
    "SaveOptions",
    "SaveResult",
    "StatusEntry",
    "StatusReport",
    "apply_profile",
    "clean_repo",
    "diff_profile",
    "repo_status",
    "save_profile",
]
