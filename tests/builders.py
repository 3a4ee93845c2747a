"""Builders for commit graphs and working copies used across the tests.

Graphs are written straight into a dulwich object store with explicit
timestamps, so ordering tests never depend on the wall clock.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from dulwich.index import commit_tree
from dulwich.objects import Blob, Commit, Tree
from dulwich.repo import BaseRepo, MemoryRepo

from simplerepo.store import DulwichObjectStore

BASE_TIME = 1_700_000_000
AUTHOR = "Ada Lovelace <ada@example.com>"


class GraphBuilder:
    """Writes commits with chosen trees, parents and committer times."""

    def __init__(self, repo: BaseRepo | None = None) -> None:
        if repo is None:
            repo = MemoryRepo.init_bare([], {})
            repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/master")
        self.repo: BaseRepo = repo
        self.store: DulwichObjectStore = DulwichObjectStore(self.repo)

    def tree(self, files: Mapping[str, bytes]) -> bytes:
        object_store = self.repo.object_store
        entries: list[tuple[bytes, bytes, int]] = []
        for path, data in files.items():
            blob = Blob.from_string(data)
            object_store.add_object(blob)
            entries.append((path.encode(), blob.id, 0o100644))
        if not entries:
            empty = Tree()
            object_store.add_object(empty)
            return empty.id
        return commit_tree(object_store, entries)

    def commit(
        self,
        files: Mapping[str, bytes] | None = None,
        *,
        parents: Sequence[str] = (),
        at: int = 0,
        offset: int = 0,
        message: str = "commit",
        author: str = AUTHOR,
        ref: str | None = "HEAD",
    ) -> str:
        """Write a commit whose tree holds exactly ``files``.

        Args:
            files: Full snapshot of the tree.
            parents: Parent ids, first parent first.
            at: Seconds after BASE_TIME for author and committer dates.
            offset: Timezone offset in seconds east of UTC.
            message: Commit message.
            author: Author and committer identity.
            ref: Ref to point at the commit (``HEAD`` moves the current
                branch); None leaves refs alone.
        """
        commit = Commit()
        commit.tree = self.tree(files or {})
        commit.parents = [parent.encode() for parent in parents]
        commit.author = commit.committer = author.encode()
        commit.author_time = commit.commit_time = BASE_TIME + at
        commit.author_timezone = commit.commit_timezone = offset
        commit.message = message.encode() + b"\n"
        self.repo.object_store.add_object(commit)
        if ref is not None:
            self.repo.refs[ref.encode()] = commit.id
        return commit.id.decode()

    def chain(self, count: int, *, start: int = 0, step: int = 60) -> list[str]:
        """Write a linear history on HEAD and return ids oldest first."""
        ids: list[str] = []
        for i in range(count):
            ids.append(
                self.commit(
                    {"file.txt": f"version {i}\n".encode()},
                    parents=ids[-1:],
                    at=start + i * step,
                    message=f"commit {i}",
                )
            )
        return ids

    def dag(self, parent_lists: Sequence[Sequence[int]], times: Sequence[int]) -> list[str]:
        """Write commit ``i`` with parents ``parent_lists[i]`` (indexes below i).

        The last commit becomes HEAD.
        """
        ids: list[str] = []
        for i, (parent_indexes, when) in enumerate(zip(parent_lists, times, strict=True)):
            ids.append(
                self.commit(
                    {f"node{i}.txt": f"{i}\n".encode()},
                    parents=[ids[p] for p in parent_indexes],
                    at=when,
                    message=f"node {i}",
                    ref=None,
                )
            )
        if ids:
            self.repo.refs[b"HEAD"] = ids[-1].encode()
        return ids


def write_file(root: Path, path: str, content: str | bytes) -> Path:
    """Write a file below ``root``, creating parent directories."""
    target = root.joinpath(*path.split("/"))
    target.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode()
    target.write_bytes(content)
    return target
