"""ObjectStore implementation over a dulwich repository."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, override

from dulwich.errors import NotTreeError
from dulwich.file import FileLocked
from dulwich.index import commit_tree
from dulwich.object_store import iter_tree_contents, peel_sha, tree_lookup_path
from dulwich.objects import Blob, Commit, Tree

from simplerepo.exceptions import RefNotFoundError
from simplerepo.store._models import CommitNode, Identity, TreeItem
from simplerepo.utils import create_null_logger, from_git_time, to_git_time

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from dulwich.repo import BaseRepo
    from structlog.typing import FilteringBoundLogger

_FULL_HEX = re.compile(r"[0-9a-f]{40}")
_SHORT_HEX = re.compile(r"[0-9a-f]{4,39}")


def encode_path(path: str) -> bytes:
    """Encode a repository path the way it is stored in trees and the index."""
    return path.encode("utf-8", errors="surrogateescape")


def decode_path(path: bytes) -> str:
    """Decode a tree or index path into a POSIX ``str`` path."""
    return path.decode("utf-8", errors="surrogateescape")


def _parse_identity(raw: bytes, when: int, offset: int, encoding: str) -> Identity:
    text = raw.decode(encoding, errors="replace")
    name, _, email = text.partition("<")
    return Identity(
        name=name.strip(),
        email=email.rstrip().removesuffix(">").strip(),
        when=from_git_time(when, offset),
    )


class DulwichObjectStore:
    """Object store backed by any dulwich repository.

    Works with on-disk ``Repo`` and in-memory ``MemoryRepo`` alike. Parsed
    commits are kept in an arena keyed by id; commits are immutable so the
    arena never needs invalidating.

    Args:
        repo: The dulwich repository.
        logger: Optional structlog logger.
    """

    def __init__(
        self,
        repo: BaseRepo,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._repo: BaseRepo = repo
        self._logger: FilteringBoundLogger = logger or create_null_logger()
        self._commits: dict[str, CommitNode] = {}
        self._trees: dict[str, dict[str, TreeItem]] = {}

    @property
    def repo(self) -> BaseRepo:
        """The underlying dulwich repository."""
        return self._repo

    # -------------------------------------------------------------------------
    # Refs
    # -------------------------------------------------------------------------

    def resolve_ref(self, name: str) -> str:
        """Resolve a ref name or commit id to a commit id.

        Lookup order follows git: full hex id, then ``HEAD`` or a full ref
        name, then ``refs/<name>``, ``refs/tags/``, ``refs/heads/``,
        ``refs/remotes/`` and ``refs/remotes/<name>/HEAD``, then a unique
        abbreviated id. Annotated tags are peeled.

        Raises:
            RefNotFoundError: If nothing matches or the target is not a commit.
        """
        store = self._repo.object_store
        if _FULL_HEX.fullmatch(name) and name.encode("ascii") in store:
            return self._peel(name, name.encode("ascii"))

        for candidate in self._ref_candidates(name):
            try:
                sha = self._repo.refs[candidate]
            except KeyError:
                continue
            return self._peel(name, sha)

        if _SHORT_HEX.fullmatch(name):
            matches = [
                sha
                for sha in store.iter_prefix(name.encode("ascii"))
                if isinstance(store[sha], Commit)
            ]
            if len(matches) == 1:
                return matches[0].decode("ascii")

        msg = f"Cannot resolve '{name}' to a commit"
        raise RefNotFoundError(msg, ref=name)

    def _ref_candidates(self, name: str) -> list[bytes]:
        if name == "HEAD" or name.startswith("refs/"):
            return [name.encode("utf-8")]
        return [
            f"refs/{name}".encode(),
            f"refs/tags/{name}".encode(),
            f"refs/heads/{name}".encode(),
            f"refs/remotes/{name}".encode(),
            f"refs/remotes/{name}/HEAD".encode(),
        ]

    def _peel(self, name: str, sha: bytes) -> str:
        try:
            _, obj = peel_sha(self._repo.object_store, sha)
        except KeyError as e:
            msg = f"'{name}' points to a missing object"
            raise RefNotFoundError(msg, ref=name) from e
        if not isinstance(obj, Commit):
            msg = f"'{name}' does not point to a commit"
            raise RefNotFoundError(msg, ref=name)
        return obj.id.decode("ascii")

    def update_ref(
        self,
        name: str,
        new_id: str,
        *,
        expected: str | None = None,
        force: bool = False,
    ) -> bool:
        """Move a ref, following symbolic refs to the ref they point at.

        Args:
            name: Ref to update (``HEAD`` updates the checked-out branch).
            new_id: Commit id to store.
            expected: Id the ref must currently hold; None means the ref
                must not exist yet.
            force: Skip the compare-and-swap check.

        Returns:
            True if the ref was updated, False if it held another value or
            another writer had it locked.
        """
        refs = self._repo.refs
        names, _ = refs.follow(name.encode("utf-8"))
        target = names[-1]
        new = new_id.encode("ascii")

        try:
            if force:
                refs[target] = new
                updated = True
            elif expected is None:
                updated = refs.add_if_new(target, new)
            else:
                updated = refs.set_if_equals(target, expected.encode("ascii"), new)
        except FileLocked:
            # Another writer is moving the same ref
            updated = False

        self._logger.debug(
            "ref_updated" if updated else "ref_update_rejected",
            ref=decode_path(target),
            new_id=new_id,
            expected=expected,
        )
        return updated

    def symbolic_target(self, name: str = "HEAD") -> str | None:
        """Return the ref a symbolic ref points at, or None if detached."""
        names, _ = self._repo.refs.follow(name.encode("utf-8"))
        if len(names) < 2:  # noqa: PLR2004
            return None
        return decode_path(names[-1])

    def set_symbolic_ref(self, name: str, target: str) -> None:
        """Point a symbolic ref (usually ``HEAD``) at another ref."""
        self._repo.refs.set_symbolic_ref(name.encode("utf-8"), target.encode("utf-8"))

    def detach_head(self, commit_id: str) -> None:
        """Point HEAD directly at a commit, leaving the branch it named alone."""
        refs = self._repo.refs
        # Assigning through a symbolic HEAD would move the branch instead
        del refs[b"HEAD"]
        refs[b"HEAD"] = commit_id.encode("ascii")
        self._logger.debug("head_detached", commit_id=commit_id)

    def list_refs(self, prefix: str = "refs/") -> dict[str, str]:
        """Return refs under ``prefix`` mapped to the ids they hold."""
        result: dict[str, str] = {}
        for ref, sha in self._repo.get_refs().items():
            ref_name = decode_path(ref)
            if ref_name.startswith(prefix):
                result[ref_name] = sha.decode("ascii")
        return result

    # -------------------------------------------------------------------------
    # Objects
    # -------------------------------------------------------------------------

    def get_commit(self, commit_id: str) -> CommitNode:
        """Return the commit with the given id from the arena.

        Raises:
            RefNotFoundError: If no commit with that id exists.
        """
        node = self._commits.get(commit_id)
        if node is not None:
            return node

        try:
            obj = self._repo.object_store[commit_id.encode("ascii")]
        except KeyError as e:
            msg = f"Commit not found: {commit_id}"
            raise RefNotFoundError(msg, ref=commit_id) from e
        if not isinstance(obj, Commit):
            msg = f"Not a commit: {commit_id}"
            raise RefNotFoundError(msg, ref=commit_id)

        encoding = obj.encoding.decode("ascii") if obj.encoding else "utf-8"
        node = CommitNode(
            id=commit_id,
            parents=tuple(p.decode("ascii") for p in obj.parents),
            author=_parse_identity(
                obj.author, obj.author_time, obj.author_timezone, encoding
            ),
            committer=_parse_identity(
                obj.committer, obj.commit_time, obj.commit_timezone, encoding
            ),
            message=obj.message.decode(encoding, errors="replace"),
            tree=obj.tree.decode("ascii"),
        )
        self._commits[commit_id] = node
        return node

    def get_tree_entries(self, tree_id: str | None) -> Mapping[str, TreeItem]:
        """Return every non-tree entry of a tree keyed by path.

        Gitlinks (submodules) are included with their commit id as hash.
        """
        if tree_id is None:
            return {}
        cached = self._trees.get(tree_id)
        if cached is not None:
            return cached

        entries: dict[str, TreeItem] = {}
        for entry in iter_tree_contents(
            self._repo.object_store, tree_id.encode("ascii")
        ):
            path = decode_path(entry.path)
            entries[path] = TreeItem(
                path=path, blob_hash=entry.sha.decode("ascii"), mode=entry.mode
            )
        self._trees[tree_id] = entries
        return entries

    def get_tree(self, tree_id: str | None) -> Mapping[str, str]:
        """Return a flattened ``path -> blob hash`` view of a tree."""
        return {
            path: item.blob_hash for path, item in self.get_tree_entries(tree_id).items()
        }

    def lookup_path(self, tree_id: str, path: str) -> str | None:
        """Return the id of the blob or tree at ``path``, or None if absent."""
        clean = path.strip("/")
        if clean in {"", "."}:
            return tree_id
        store = self._repo.object_store
        try:
            _, sha = tree_lookup_path(
                store.__getitem__, tree_id.encode("ascii"), encode_path(clean)
            )
        except (KeyError, NotTreeError):
            return None
        return sha.decode("ascii")

    def read_blob(self, blob_id: str) -> bytes:
        """Return the raw content of a blob.

        Raises:
            KeyError: If the blob does not exist.
        """
        obj = self._repo.object_store[blob_id.encode("ascii")]
        if not isinstance(obj, Blob):
            msg = f"Not a blob: {blob_id}"
            raise KeyError(msg)
        return obj.as_raw_string()

    def write_blob(self, data: bytes) -> str:
        """Store a blob and return its id."""
        blob = Blob.from_string(data)
        self._repo.object_store.add_object(blob)
        return blob.id.decode("ascii")

    def write_tree(self, items: Iterable[TreeItem]) -> str:
        """Store the trees for a set of entries and return the root tree id."""
        entries = [
            (encode_path(item.path), item.blob_hash.encode("ascii"), item.mode)
            for item in items
        ]
        if not entries:
            tree = Tree()
            self._repo.object_store.add_object(tree)
            return tree.id.decode("ascii")
        return commit_tree(self._repo.object_store, entries).decode("ascii")

    def create_commit(
        self,
        tree: str,
        parents: tuple[str, ...],
        author: Identity,
        committer: Identity,
        message: str,
    ) -> str:
        """Store a new commit object and return its id.

        No ref is moved; see ``update_ref``.
        """
        commit = Commit()
        commit.tree = tree.encode("ascii")
        commit.parents = [parent.encode("ascii") for parent in parents]
        commit.author = str(author).encode("utf-8")
        commit.author_time, commit.author_timezone = to_git_time(author.when)
        commit.committer = str(committer).encode("utf-8")
        commit.commit_time, commit.commit_timezone = to_git_time(committer.when)
        commit.encoding = b"UTF-8"
        commit.message = message.encode("utf-8")
        self._repo.object_store.add_object(commit)

        commit_id = commit.id.decode("ascii")
        self._logger.debug("commit_object_written", commit_id=commit_id, tree=tree)
        return commit_id

    def has_object(self, object_id: str) -> bool:
        """Return True if the object exists in the store."""
        return _FULL_HEX.fullmatch(object_id) is not None and (
            object_id.encode("ascii") in self._repo.object_store
        )

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._repo!r})"
