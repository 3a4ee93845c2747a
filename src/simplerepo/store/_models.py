"""Commit graph value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class Identity:
    """A person and a point in time, as recorded on a commit.

    Attributes:
        name: Display name.
        email: Email address.
        when: Timezone-aware timestamp in the person's own offset.
    """

    name: str
    email: str
    when: datetime

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True, slots=True)
class CommitNode:
    """A commit in the graph arena.

    Parents are referenced by id, never by object, so traversal never
    depends on how nodes are held in memory.

    Attributes:
        id: Full hex commit id.
        parents: Parent ids, first parent first.
        author: Who wrote the change.
        committer: Who recorded the commit.
        message: Full commit message.
        tree: Hex id of the root tree.
    """

    id: str
    parents: tuple[str, ...]
    author: Identity
    committer: Identity
    message: str
    tree: str

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0].strip()

    @property
    def body(self) -> str:
        """Message text after the blank line that ends the subject."""
        _, sep, rest = self.message.partition("\n\n")
        return rest.strip() if sep else ""

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def is_root(self) -> bool:
        return not self.parents


@dataclass(frozen=True, slots=True)
class TreeItem:
    """A non-tree entry of a flattened tree.

    Attributes:
        path: Repository-relative POSIX path.
        blob_hash: Hex id of the blob (or commit, for a gitlink).
        mode: Git file mode.
    """

    path: str
    blob_hash: str
    mode: int
