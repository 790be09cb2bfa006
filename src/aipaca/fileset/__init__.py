"""Repository AI file discovery: pattern expansion, tree listing, and copying."""

from .checksum import dir_checksum, file_checksum
from .patterns import expand_patterns, find_ai_files, is_ai_file
from .tree import copy_path, count_files, list_all_files, list_top_level, remove_path

__all__ = [
    "copy_path",
    "count_files",
    "dir_checksum",
    "expand_patterns",
    "file_checksum",
    "find_ai_files",
    "is_ai_file",
    "list_all_files",
    "list_top_level",
    "remove_path",
]
