"""Commit change descriptions.

Classes:
    ChangeFormatter: Diffs a commit against its first parent
    ExactRenameDetector: Pairs deletions and additions with identical content

Functions:
    render: ``git whatchanged``-style text for a record

Models:
    ChangeRecord: A commit and its path changes
    PathChange: One changed path
"""

from ._formatter import ChangeFormatter, render
from ._models import ChangeRecord, PathChange
from ._renames import ExactRenameDetector, RenameDetector

__all__ = [
    "ChangeFormatter",
    "ChangeRecord",
    "ExactRenameDetector",
    "PathChange",
    "RenameDetector",
    "render",
]
