"""Reconciliation data models."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, computed_field


class ChangeKind(str, Enum):
    """Classification of a path that differs between two trees."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class FileChange(BaseModel):
    """A single differing path.

    Attributes:
        path: Relative, `/`-separated path of the file.
        kind: How the repository copy differs from the reference copy.
    """

    path: str
    kind: ChangeKind


class DiffReport(BaseModel):
    """Outcome of comparing a repository tree with a reference tree.

    Attributes:
        changes: Differences sorted by path.
        undetermined: Paths present on both sides whose contents could not be
            compared; they are not reported as changes.
    """

    changes: List[FileChange] = Field(default_factory=list)
    undetermined: List[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def paths(self, kind: ChangeKind) -> list[str]:
        """Return the changed paths of one kind."""
        return [change.path for change in self.changes if change.kind == kind]


__all__ = ["ChangeKind", "DiffReport", "FileChange"]
