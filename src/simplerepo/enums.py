"""Enumeration types for simplerepo."""

from enum import StrEnum


class StageFlag(StrEnum):
    """Stage state of an index entry relative to HEAD."""

    NORMAL = "normal"
    ADDED = "added"
    REMOVED_PENDING = "removed-pending"


class IndexStatus(StrEnum):
    """Status of a path in the index compared to the HEAD tree."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    UNTRACKED = "untracked"
    MODIFIED = "modified"


class RepoStatus(StrEnum):
    """Status of a path in the working tree compared to the staged state."""

    UNCHANGED = "unchanged"
    UNTRACKED = "untracked"
    MODIFIED = "modified"
    REMOVED = "removed"


class ChangeKind(StrEnum):
    """Kind of change a commit made to a path."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"

    @property
    def letter(self) -> str:
        """Single-letter code used by git's raw diff output."""
        return {
            ChangeKind.ADDED: "A",
            ChangeKind.MODIFIED: "M",
            ChangeKind.DELETED: "D",
            ChangeKind.RENAMED: "R",
        }[self]
