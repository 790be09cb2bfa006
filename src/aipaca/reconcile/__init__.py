"""Reconciliation between repository AI files and stored trees."""

from .engine import diff_directory, diff_trees, files_equal, flatten_file_set, list_tree
from .models import ChangeKind, DiffReport, FileChange

__all__ = [
    "ChangeKind",
    "DiffReport",
    "FileChange",
    "diff_directory",
    "diff_trees",
    "files_equal",
    "flatten_file_set",
    "list_tree",
]
