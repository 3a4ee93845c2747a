"""Commit graph traversal."""

from __future__ import annotations

import heapq
import itertools
from collections import deque
from typing import TYPE_CHECKING

from simplerepo.exceptions import RefNotFoundError
from simplerepo.revwalk._filter import RevisionFilter
from simplerepo.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from structlog.typing import FilteringBoundLogger

    from simplerepo.store import CommitNode, ObjectStore


class RevisionWalker:
    """Walks the commit graph newest first.

    Commits come off a priority queue keyed by committer date, with ties
    going to the commit queued first; parents are queued in order, so the
    first parent wins a tie. Every commit is visited once however many
    paths lead to it. Date, path and count filters decide what is emitted
    but never which commits are traversed, so out-of-window commits still
    connect their ancestors to the walk.

    Args:
        store: Object store holding the graph.
        logger: Optional structlog logger.

    Example:
        >>> walker = RevisionWalker(store)
        >>> walker.walk(RevisionFilter(start_points=("main",), stop_points=("v1.0",)))
        ('3f2a...', '9c1d...')
    """

    def __init__(
        self,
        store: ObjectStore,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._store: ObjectStore = store
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    def walk(self, revision_filter: RevisionFilter | None = None) -> tuple[str, ...]:
        """Return the ids of the matching commits, most recent first.

        Raises:
            RefNotFoundError: If an explicitly named start or stop point
                cannot be resolved.
        """
        revision_filter = revision_filter or RevisionFilter()
        result = tuple(self.iter_walk(revision_filter))
        self._logger.info(
            "walk_completed",
            start_points=list(revision_filter.start_points) or ["HEAD"],
            stop_points=list(revision_filter.stop_points),
            path=revision_filter.path,
            emitted=len(result),
        )
        return result

    def iter_walk(self, revision_filter: RevisionFilter) -> Iterator[str]:
        """Lazily yield the ids of the matching commits.

        Start and stop points are resolved before the first id is yielded.

        Raises:
            RefNotFoundError: If an explicitly named start or stop point
                cannot be resolved.
        """
        starts = self._resolve_starts(revision_filter)
        stops = [self._store.resolve_ref(name) for name in revision_filter.stop_points]
        excluded = self._ancestry(stops)
        starts = [start for start in starts if start not in excluded]
        if not starts or revision_filter.max_count == 0:
            return iter(())

        if revision_filter.topo_order:
            ordered = self._topo_order(starts, excluded)
        else:
            ordered = self._date_order(starts, excluded)

        emitted = (
            commit.id for commit in ordered if self._matches(commit, revision_filter)
        )
        if revision_filter.max_count > 0:
            return itertools.islice(emitted, revision_filter.max_count)
        return emitted

    def _resolve_starts(self, revision_filter: RevisionFilter) -> list[str]:
        if revision_filter.start_points:
            return [self._store.resolve_ref(name) for name in revision_filter.start_points]
        try:
            return [self._store.resolve_ref("HEAD")]
        except RefNotFoundError:
            # Unborn HEAD: nothing has been committed yet
            return []

    def _ancestry(self, roots: Iterable[str]) -> set[str]:
        """Return the roots and every commit reachable from them."""
        seen: set[str] = set()
        queue = deque(roots)
        while queue:
            commit_id = queue.popleft()
            if commit_id in seen:
                continue
            seen.add(commit_id)
            queue.extend(self._store.get_commit(commit_id).parents)
        return seen

    def _date_order(self, starts: list[str], excluded: set[str]) -> Iterator[CommitNode]:
        order = itertools.count()
        queue: list[tuple[float, int, str]] = []
        queued: set[str] = set()

        def push(commit_id: str) -> None:
            if commit_id in queued or commit_id in excluded:
                return
            queued.add(commit_id)
            when = self._store.get_commit(commit_id).committer.when
            heapq.heappush(queue, (-when.timestamp(), next(order), commit_id))

        for start in starts:
            push(start)

        while queue:
            _, _, commit_id = heapq.heappop(queue)
            commit = self._store.get_commit(commit_id)
            for parent in commit.parents:
                push(parent)
            yield commit

    def _topo_order(self, starts: list[str], excluded: set[str]) -> Iterator[CommitNode]:
        # Included set in date order, then Kahn's algorithm over child counts
        included = list(self._date_order(starts, excluded))
        position = {commit.id: i for i, commit in enumerate(included)}
        pending_children = dict.fromkeys(position, 0)
        for commit in included:
            for parent in commit.parents:
                if parent in pending_children:
                    pending_children[parent] += 1

        ready = [position[c.id] for c in included if pending_children[c.id] == 0]
        heapq.heapify(ready)
        while ready:
            commit = included[heapq.heappop(ready)]
            yield commit
            for parent in commit.parents:
                if parent not in pending_children:
                    continue
                pending_children[parent] -= 1
                if pending_children[parent] == 0:
                    heapq.heappush(ready, position[parent])

    def _matches(self, commit: CommitNode, revision_filter: RevisionFilter) -> bool:
        if not revision_filter.in_window(commit.committer.when):
            return False
        if revision_filter.path is not None:
            return self._touches(commit, revision_filter.path)
        return True

    def _touches(self, commit: CommitNode, path: str) -> bool:
        """Return True if the object at ``path`` differs from every parent."""
        mine = self._store.lookup_path(commit.tree, path)
        if not commit.parents:
            return mine is not None
        return all(
            self._store.lookup_path(self._store.get_commit(parent).tree, path) != mine
            for parent in commit.parents
        )
