"""Working tree enumeration and content hashing."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from dulwich.index import cleanup_mode, read_submodule_head
from dulwich.objects import S_IFGITLINK, Blob

from simplerepo.exceptions import PathOutsideRepositoryError, RepositoryIOError
from simplerepo.utils import create_null_logger
from simplerepo.worktree._models import WorkingTreeEntry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.typing import FilteringBoundLogger

CONTROL_DIR = ".git"


class WorkingTreeScanner:
    """Enumerates files in a working tree with their stat metadata.

    Only regular files and symlinks are reported. The ``.git`` control
    directory is never entered. A directory holding its own ``.git`` is a
    nested repository: it is reported as a single opaque entry unless
    ``recurse_submodules`` is set, in which case its files are scanned as
    ordinary paths.

    Args:
        root: Working tree root.
        recurse_submodules: Scan into nested repositories.
        logger: Optional structlog logger.
    """

    def __init__(
        self,
        root: Path,
        *,
        recurse_submodules: bool = False,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._root: Path = root
        self._recurse_submodules: bool = recurse_submodules
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    @property
    def root(self) -> Path:
        return self._root

    def list_files(
        self, *, recurse_submodules: bool | None = None
    ) -> list[WorkingTreeEntry]:
        """Scan the working tree.

        Files that disappear while the scan is running are skipped.

        Args:
            recurse_submodules: Override the scanner's nested repository
                setting for this scan.

        Returns:
            Entries sorted by path.

        Raises:
            RepositoryIOError: If a directory cannot be read.
        """
        recurse = (
            self._recurse_submodules
            if recurse_submodules is None
            else recurse_submodules
        )
        entries = sorted(
            self._scan(self._root, "", recurse=recurse), key=lambda e: e.path
        )
        self._logger.debug(
            "worktree_scanned", root=str(self._root), files=len(entries)
        )
        return entries

    def _scan(
        self, directory: Path, prefix: str, *, recurse: bool
    ) -> Iterator[WorkingTreeEntry]:
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except FileNotFoundError:
            return
        except OSError as e:
            msg = f"Cannot read directory {directory}: {e}"
            raise RepositoryIOError(msg, path=directory, operation="scan") from e

        for child in children:
            if child.name == CONTROL_DIR:
                continue
            rel = f"{prefix}{child.name}"
            try:
                if child.is_dir(follow_symlinks=False):
                    child_path = Path(child.path)
                    if not recurse and _is_nested_repo(child_path):
                        st = child.stat(follow_symlinks=False)
                        yield WorkingTreeEntry(
                            path=rel,
                            mtime_ns=st.st_mtime_ns,
                            size=0,
                            mode=S_IFGITLINK,
                            is_submodule=True,
                        )
                    else:
                        yield from self._scan(child_path, f"{rel}/", recurse=recurse)
                    continue
                st = child.stat(follow_symlinks=False)
            except FileNotFoundError:
                continue

            if stat.S_ISREG(st.st_mode) or stat.S_ISLNK(st.st_mode):
                yield WorkingTreeEntry(
                    path=rel,
                    mtime_ns=st.st_mtime_ns,
                    size=st.st_size,
                    mode=cleanup_mode(st.st_mode),
                )

    def absolute(self, path: str) -> Path:
        """Return the filesystem path for a repository-relative path."""
        return self._root.joinpath(*path.split("/"))

    def relative(self, path: Path | str) -> str:
        """Return the repository-relative POSIX path for a filesystem path.

        Relative inputs are taken relative to the working tree root.

        Raises:
            PathOutsideRepositoryError: If the path is outside the working tree.
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self._root / candidate
        resolved = Path(os.path.normpath(candidate))
        root = Path(os.path.normpath(self._root))
        try:
            relative = resolved.relative_to(root)
        except ValueError as e:
            msg = f"Path {path} is outside the working tree {self._root}"
            raise PathOutsideRepositoryError(msg, path=Path(path), root=self._root) from e
        if relative.parts[:1] == (CONTROL_DIR,):
            msg = f"Path {path} is inside the repository control directory"
            raise PathOutsideRepositoryError(msg, path=Path(path), root=self._root)
        return relative.as_posix() if relative.parts else ""

    def stat(self, path: str) -> os.stat_result | None:
        """Return ``lstat`` for a path, or None if it does not exist."""
        try:
            return self.absolute(path).lstat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            msg = f"Cannot stat {path}: {e}"
            raise RepositoryIOError(msg, path=self.absolute(path), operation="read") from e

    def read_content(self, path: str) -> bytes | None:
        """Return the blob content for a file or symlink, or None if absent.

        Raises:
            RepositoryIOError: If the file exists but cannot be read.
        """
        full = self.absolute(path)
        try:
            if full.is_symlink():
                return os.fsencode(os.readlink(full))
            return full.read_bytes()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return None
        except OSError as e:
            msg = f"Cannot read {path}: {e}"
            raise RepositoryIOError(msg, path=full, operation="read") from e

    def read_content_hash(self, path: str) -> str | None:
        """Return the git object id the path would have if staged.

        For a nested repository this is its HEAD commit id. Returns None when
        the path has vanished (or a nested repository has no commits).

        Raises:
            RepositoryIOError: If the file exists but cannot be read.
        """
        full = self.absolute(path)
        if full.is_dir() and not full.is_symlink():
            head = read_submodule_head(str(full))
            return head.decode("ascii") if head is not None else None

        content = self.read_content(path)
        if content is None:
            return None
        return Blob.from_string(content).id.decode("ascii")


def _is_nested_repo(directory: Path) -> bool:
    return (directory / CONTROL_DIR).exists()
