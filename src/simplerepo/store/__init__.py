"""Object store access.

Classes:
    ObjectStore: Protocol the graph algorithms depend on
    DulwichObjectStore: Implementation over a dulwich repository

Models:
    CommitNode: A commit in the graph arena
    Identity: Author or committer with timestamp
    TreeItem: A flattened tree entry
"""

from ._dulwich import DulwichObjectStore, decode_path, encode_path
from ._models import CommitNode, Identity, TreeItem
from ._protocol import ObjectStore

__all__ = [
    "CommitNode",
    "DulwichObjectStore",
    "Identity",
    "ObjectStore",
    "TreeItem",
    "decode_path",
    "encode_path",
]
