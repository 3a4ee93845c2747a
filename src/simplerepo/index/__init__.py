"""The staging area.

Classes:
    IndexStore: Staged-changes table over the on-disk git index

Models:
    IndexEntry: One staged path
"""

from ._models import IndexEntry
from ._store import IndexStore, validate_index_path

__all__ = ["IndexEntry", "IndexStore", "validate_index_path"]
