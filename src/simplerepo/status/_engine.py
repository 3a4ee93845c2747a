"""Status computation by merge-joining HEAD, index and working tree."""

from __future__ import annotations

import heapq
import itertools
from typing import TYPE_CHECKING

from simplerepo.status._classify import UNCHANGED, classify
from simplerepo.status._models import StatusRecord
from simplerepo.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence

    from structlog.typing import FilteringBoundLogger

    from simplerepo.index import IndexEntry
    from simplerepo.worktree import IgnoreRules, WorkingTreeEntry, WorkingTreeScanner

_HEAD, _INDEX, _WORK = 0, 1, 2

# Stands in for the hash of an untracked file: only its presence is compared
_UNHASHED = "untracked"


class StatusEngine:
    """Computes per-path status from HEAD, the index and the working tree.

    The three sources are read once per call and joined in path order, so
    the result reflects a single snapshot. Working tree files whose size and
    mtime match their index entry are assumed unchanged unless they are
    racily clean (modified no earlier than the index was written); every
    other comparison hashes the file.

    Args:
        scanner: Working tree scanner.
        ignore_rules: Ignore engine consulted for untracked paths.
        trust_stat_info: Use the size/mtime shortcut described above.
        logger: Optional structlog logger.
    """

    def __init__(
        self,
        scanner: WorkingTreeScanner,
        *,
        ignore_rules: IgnoreRules | None = None,
        trust_stat_info: bool = True,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._scanner: WorkingTreeScanner = scanner
        self._ignore_rules: IgnoreRules | None = ignore_rules
        self._trust_stat_info: bool = trust_stat_info
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    def status(
        self,
        head_tree: Mapping[str, str],
        index_entries: Sequence[IndexEntry],
        *,
        index_mtime_ns: int | None = None,
        include_ignored: bool = False,
        recurse_submodules: bool = False,
    ) -> tuple[StatusRecord, ...]:
        """Classify every path that differs between any two sources.

        Args:
            head_tree: HEAD tree as ``path -> blob hash`` (empty when unborn).
            index_entries: Index entries sorted by path, including
                REMOVED_PENDING ones.
            index_mtime_ns: Modification time of the index file, used for
                the racily-clean check.
            include_ignored: Report ignored untracked files as UNTRACKED.
            recurse_submodules: Scan nested repositories as plain files
                instead of comparing their HEAD commit.

        Returns:
            Records in lexicographic path order.
        """
        work_entries = self._scanner.list_files(recurse_submodules=recurse_submodules)

        records: list[StatusRecord] = []
        for path, group in itertools.groupby(
            _merge(head_tree, index_entries, work_entries), key=lambda item: item[0]
        ):
            head_hash: str | None = None
            index_entry: IndexEntry | None = None
            work_entry: WorkingTreeEntry | None = None
            for _, source, payload in group:
                if source == _HEAD:
                    head_hash = payload
                elif source == _INDEX:
                    index_entry = payload
                else:
                    work_entry = payload

            if (
                head_hash is None
                and index_entry is None
                and not include_ignored
                and self._is_ignored(path)
            ):
                continue

            work_hash = self._work_hash(
                path, head_hash, index_entry, work_entry, index_mtime_ns
            )
            classification = classify(head_hash, index_entry, work_hash)
            if classification != UNCHANGED:
                records.append(StatusRecord(path, *classification))

        self._logger.info(
            "status_completed",
            root=str(self._scanner.root),
            scanned=len(work_entries),
            changed=len(records),
        )
        return tuple(records)

    def _is_ignored(self, path: str) -> bool:
        return self._ignore_rules is not None and self._ignore_rules.is_ignored(path)

    def _work_hash(
        self,
        path: str,
        head_hash: str | None,
        index_entry: IndexEntry | None,
        work_entry: WorkingTreeEntry | None,
        index_mtime_ns: int | None,
    ) -> str | None:
        if head_hash is None and index_entry is None:
            return _UNHASHED if work_entry is not None else None

        if work_entry is None:
            # Not a plain file in this scan: a nested repository scanned
            # through, or a file that has since vanished
            return self._scanner.read_content_hash(path)

        if (
            self._trust_stat_info
            and index_entry is not None
            and not index_entry.is_removed
            and not work_entry.is_submodule
            and index_entry.size == work_entry.size
            and index_entry.mtime_ns == work_entry.mtime_ns
            and index_entry.mode == work_entry.mode
            and (index_mtime_ns is None or work_entry.mtime_ns < index_mtime_ns)
        ):
            return index_entry.blob_hash

        return self._scanner.read_content_hash(path)


def _merge(
    head_tree: Mapping[str, str],
    index_entries: Iterable[IndexEntry],
    work_entries: Iterable[WorkingTreeEntry],
) -> Iterator[tuple[str, int, object]]:
    """Merge the three sources into one stream ordered by path, then source."""
    head = ((path, _HEAD, head_tree[path]) for path in sorted(head_tree))
    index = ((entry.path, _INDEX, entry) for entry in index_entries)
    work = ((entry.path, _WORK, entry) for entry in work_entries)
    return heapq.merge(head, index, work, key=lambda item: (item[0], item[1]))
