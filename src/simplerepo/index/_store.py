"""Staging area backed by the on-disk git index."""

from __future__ import annotations

import os
import stat
import struct
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, cast

from dulwich.errors import ChecksumMismatch
from dulwich.file import FileLocked, GitFile
from dulwich.index import (
    ConflictedIndexEntry,
    Index,
    UnsupportedIndexFormat,
    cleanup_mode,
    write_index_dict,
)
from dulwich.index import IndexEntry as DulwichIndexEntry
from dulwich.objects import S_IFGITLINK
from dulwich.pack import SHA1Writer

from simplerepo.enums import StageFlag
from simplerepo.exceptions import (
    IndexCorruptError,
    LockHeldError,
    PathOutsideRepositoryError,
    RepositoryIOError,
)
from simplerepo.index._models import IndexEntry
from simplerepo.store import TreeItem, decode_path, encode_path
from simplerepo.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping
    from pathlib import Path
    from typing import BinaryIO

    from dulwich.file import _GitFile
    from structlog.typing import FilteringBoundLogger


_NS = 1_000_000_000
_DEFAULT_MODE = stat.S_IFREG | 0o644


def _split_ns(value: int) -> tuple[int, int]:
    return value // _NS, value % _NS


def _to_ns(value: int | float | tuple[int, int]) -> int:
    if isinstance(value, tuple):
        seconds, nanoseconds = value
        return seconds * _NS + nanoseconds
    return int(value * _NS)


def validate_index_path(path: str) -> str:
    """Check that a path can be stored in the index.

    Args:
        path: Repository-relative POSIX path.

    Returns:
        The path with redundant slashes removed.

    Raises:
        PathOutsideRepositoryError: If the path is empty, absolute, escapes
            the root, or points into the control directory.
    """
    pure = PurePosixPath(path)
    if (
        not path
        or pure.is_absolute()
        or any(part in {"..", "."} for part in path.split("/") if part)
        or pure.parts[:1] == (".git",)
    ):
        msg = f"Invalid index path: {path!r}"
        raise PathOutsideRepositoryError(msg, path=None)
    return pure.as_posix()


class IndexStore:
    """The staged-changes table, one entry per path.

    Entries live in memory after ``reload()``; mutations are written back
    with ``persist()``. Writes go through ``index.lock`` and are renamed over
    the index only when complete, so the file on disk is never partially
    written. A lock held by another writer fails immediately with
    LockHeldError. Any failed write restores the in-memory entries to what
    was last loaded or persisted.

    Stage flags are derived against a HEAD tree snapshot taken on reload:
    ADDED for paths not in HEAD, NORMAL for paths in HEAD, and
    REMOVED_PENDING for HEAD paths with no index entry.

    Args:
        index_path: Path to the index file (it need not exist yet).
        head_tree: Returns the current HEAD tree as ``path -> blob hash``.
        logger: Optional structlog logger.

    Example:
        >>> store = IndexStore(git_dir / "index")
        >>> with store.transaction():
        ...     store.add_path("README.md", blob_id)
    """

    def __init__(
        self,
        index_path: Path,
        *,
        head_tree: Callable[[], Mapping[str, str]] | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._path: Path = index_path
        self._head_tree: Callable[[], Mapping[str, str]] = head_tree or dict
        self._logger: FilteringBoundLogger = logger or create_null_logger()
        self._entries: dict[str, DulwichIndexEntry] = {}
        self._snapshot: dict[str, DulwichIndexEntry] = {}
        self._head: Mapping[str, str] = {}
        self._lock: _GitFile | None = None
        self._mtime_ns: int | None = None
        self.reload()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def index_mtime_ns(self) -> int | None:
        """Modification time of the index file when last read or written."""
        return self._mtime_ns

    # -------------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------------

    def reload(self) -> None:
        """Discard in-memory changes and read the index and HEAD tree again.

        Raises:
            IndexCorruptError: If the index file cannot be parsed.
        """
        try:
            index = Index(str(self._path))
        except (
            ChecksumMismatch,
            UnsupportedIndexFormat,
            AssertionError,
            struct.error,
            ValueError,
        ) as e:
            msg = f"Malformed index file {self._path}: {e}"
            raise IndexCorruptError(msg, path=self._path) from e

        entries: dict[str, DulwichIndexEntry] = {}
        for raw_path, value in index.items():
            if isinstance(value, ConflictedIndexEntry):
                # Unmerged: keep our side so the path stays tracked
                value = value.this or value.other or value.ancestor  # noqa: PLW2901
                if value is None:
                    continue
            entries[decode_path(raw_path)] = value

        self._entries = entries
        self._snapshot = dict(entries)
        self._head = dict(self._head_tree())
        self._mtime_ns = self._stat_mtime_ns()

    def persist(self) -> None:
        """Write the in-memory entries to disk atomically.

        Inside ``transaction()`` the lock is already held and the write
        happens when the block exits, so this is a no-op there.

        Raises:
            LockHeldError: If another writer holds ``index.lock``.
            RepositoryIOError: If the write fails; entries are rolled back.
        """
        if self._lock is not None:
            return
        self._write(self._acquire())

    @contextmanager
    def transaction(self) -> Iterator[IndexStore]:
        """Hold the index lock across a read-modify-write cycle.

        The index is reloaded after the lock is taken and written when the
        block exits normally. If the block raises, the lock is released
        without writing and entries are rolled back.

        Raises:
            LockHeldError: If another writer holds ``index.lock``.
        """
        lock = self._acquire()
        self._lock = lock
        try:
            self.reload()
            yield self
        except BaseException:
            lock.abort()
            self._rollback()
            raise
        else:
            self._write(lock)
        finally:
            self._lock = None

    def _acquire(self) -> _GitFile:
        try:
            return GitFile(str(self._path), "wb")
        except FileLocked as e:
            lock_path = self._path.with_name(self._path.name + ".lock")
            msg = f"Index is locked by another writer: {lock_path}"
            raise LockHeldError(msg, lock_path=lock_path) from e
        except OSError as e:
            msg = f"Cannot lock index {self._path}: {e}"
            raise RepositoryIOError(msg, path=self._path, operation="write") from e

    def _write(self, lock: _GitFile) -> None:
        raw_entries = {encode_path(path): entry for path, entry in self._entries.items()}
        try:
            writer = SHA1Writer(cast("BinaryIO", lock))
            write_index_dict(cast("BinaryIO", writer), raw_entries)
            writer.close()
        except OSError as e:
            lock.abort()
            self._rollback()
            msg = f"Failed to write index {self._path}: {e}"
            raise RepositoryIOError(msg, path=self._path, operation="write") from e
        except Exception:
            lock.abort()
            self._rollback()
            raise

        self._snapshot = dict(self._entries)
        self._mtime_ns = self._stat_mtime_ns()
        self._logger.info(
            "index_persisted", path=str(self._path), entries=len(self._entries)
        )

    def _rollback(self) -> None:
        self._entries = dict(self._snapshot)
        self._logger.warning("index_rolled_back", path=str(self._path))

    def _stat_mtime_ns(self) -> int | None:
        try:
            return os.stat(self._path).st_mtime_ns
        except FileNotFoundError:
            return None

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def add_path(
        self,
        path: str,
        blob_hash: str,
        stat_result: os.stat_result | None = None,
        *,
        mode: int | None = None,
    ) -> IndexEntry:
        """Stage content for a path, replacing any existing entry.

        Args:
            path: Repository-relative POSIX path.
            blob_hash: Hex id of the content (or commit id for a gitlink).
            stat_result: ``lstat`` of the file, recorded for change detection.
            mode: Git mode; derived from ``stat_result`` when omitted.

        Returns:
            The new entry.

        Raises:
            PathOutsideRepositoryError: If the path is not a valid index path.
        """
        path = validate_index_path(path)
        sha = blob_hash.encode("ascii")
        if stat_result is not None:
            entry_mode = mode if mode is not None else _mode_from_stat(stat_result)
            entry = DulwichIndexEntry(
                ctime=_split_ns(stat_result.st_ctime_ns),
                mtime=_split_ns(stat_result.st_mtime_ns),
                dev=stat_result.st_dev,
                ino=stat_result.st_ino,
                mode=entry_mode,
                uid=stat_result.st_uid,
                gid=stat_result.st_gid,
                size=stat_result.st_size if entry_mode != S_IFGITLINK else 0,
                sha=sha,
                flags=0,
                extended_flags=0,
            )
        else:
            entry = DulwichIndexEntry(
                ctime=(0, 0),
                mtime=(0, 0),
                dev=0,
                ino=0,
                mode=mode if mode is not None else _DEFAULT_MODE,
                uid=0,
                gid=0,
                size=0,
                sha=sha,
                flags=0,
                extended_flags=0,
            )

        self._entries[path] = entry
        return self._to_model(path, entry)

    def remove_path(self, path: str) -> bool:
        """Drop a path from the index.

        A path present in HEAD then shows as REMOVED_PENDING.

        Returns:
            True if an entry was removed.
        """
        return self._entries.pop(validate_index_path(path), None) is not None

    def get_entry(self, path: str) -> IndexEntry | None:
        """Return the entry for a path, including REMOVED_PENDING ones."""
        entry = self._entries.get(path)
        if entry is not None:
            return self._to_model(path, entry)
        head_hash = self._head.get(path)
        if head_hash is not None:
            return IndexEntry(
                path=path, blob_hash=head_hash, stage_flag=StageFlag.REMOVED_PENDING
            )
        return None

    def entries(self) -> list[IndexEntry]:
        """Return every entry, REMOVED_PENDING ones included, sorted by path."""
        paths = sorted(self._entries.keys() | self._head.keys())
        return [entry for path in paths if (entry := self.get_entry(path)) is not None]

    def tracked_entries(self) -> list[IndexEntry]:
        """Return the entries present in the index, sorted by path."""
        return [self._to_model(path, self._entries[path]) for path in sorted(self._entries)]

    def tree_items(self) -> list[TreeItem]:
        """Return the entries as tree items, ready to be written as a tree."""
        return [
            TreeItem(path=path, blob_hash=entry.sha.decode("ascii"), mode=entry.mode)
            for path, entry in sorted(self._entries.items())
        ]

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _to_model(self, path: str, entry: DulwichIndexEntry) -> IndexEntry:
        return IndexEntry(
            path=path,
            blob_hash=entry.sha.decode("ascii"),
            stage_flag=StageFlag.NORMAL if path in self._head else StageFlag.ADDED,
            mode=entry.mode,
            size=entry.size,
            mtime_ns=_to_ns(entry.mtime),
        )


def _mode_from_stat(stat_result: os.stat_result) -> int:
    if stat.S_ISDIR(stat_result.st_mode):
        return S_IFGITLINK
    return cleanup_mode(stat_result.st_mode)
