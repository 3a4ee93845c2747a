"""Object store protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from simplerepo.store._models import CommitNode, Identity, TreeItem


class ObjectStore(Protocol):
    """Content-addressable storage of commits, trees and blobs plus refs.

    Ids are full lowercase hex strings. Ref names are given as git spells
    them (``HEAD``, ``refs/heads/main``) or in short form (``main``).
    """

    def resolve_ref(self, name: str) -> str:
        """Resolve a ref name or commit id to a commit id.

        Raises:
            RefNotFoundError: If the name does not resolve to a commit.
        """
        ...

    def get_commit(self, commit_id: str) -> CommitNode:
        """Return the commit with the given id.

        Raises:
            RefNotFoundError: If no such commit exists.
        """
        ...

    def get_tree(self, tree_id: str | None) -> Mapping[str, str]:
        """Return a flattened ``path -> blob hash`` view of a tree."""
        ...

    def get_tree_entries(self, tree_id: str | None) -> Mapping[str, TreeItem]:
        """Return a flattened ``path -> TreeItem`` view of a tree."""
        ...

    def lookup_path(self, tree_id: str, path: str) -> str | None:
        """Return the id of the object at ``path`` in a tree, if present."""
        ...

    def read_blob(self, blob_id: str) -> bytes:
        """Return the raw content of a blob."""
        ...

    def write_blob(self, data: bytes) -> str:
        """Store a blob and return its id."""
        ...

    def write_tree(self, items: Iterable[TreeItem]) -> str:
        """Store the trees needed for the given entries; return the root id."""
        ...

    def create_commit(
        self,
        tree: str,
        parents: tuple[str, ...],
        author: Identity,
        committer: Identity,
        message: str,
    ) -> str:
        """Store a new commit and return its id."""
        ...

    def update_ref(
        self,
        name: str,
        new_id: str,
        *,
        expected: str | None = None,
        force: bool = False,
    ) -> bool:
        """Move a ref, following symbolic refs.

        Without ``force`` this is a compare-and-swap: the ref must hold
        ``expected``, or must not exist when ``expected`` is None.

        Returns:
            True if the ref was updated.
        """
        ...

    def has_object(self, object_id: str) -> bool:
        """Return True if the object exists in the store."""
        ...
