"""Revision graph traversal.

Classes:
    RevisionWalker: Filtered, date-ordered commit graph walk
    RevisionFilter: Start/stop points, path, date window and count limits
"""

from ._filter import RevisionFilter
from ._walker import RevisionWalker

__all__ = ["RevisionFilter", "RevisionWalker"]
