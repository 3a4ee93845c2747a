"""Repository facade over the object store, index and working tree."""

from __future__ import annotations

import os
import stat
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self, override

from dulwich.errors import NotGitRepository
from dulwich.index import build_file_from_blob
from dulwich.objects import S_IFGITLINK, Blob
from dulwich.repo import Repo

from simplerepo.changes import ChangeFormatter, ExactRenameDetector
from simplerepo.config import Config
from simplerepo.exceptions import (
    NotARepositoryError,
    RefNotFoundError,
    RepositoryConflictError,
    RepositoryIOError,
)
from simplerepo.index import IndexStore
from simplerepo.repository import _transport
from simplerepo.repository._models import CommitResult, LsFileEntry
from simplerepo.revwalk import RevisionFilter, RevisionWalker
from simplerepo.status import StatusEngine
from simplerepo.store import DulwichObjectStore, Identity
from simplerepo.utils import close_logger, create_logger, get_author_info, parse_date
from simplerepo.worktree import IgnoreRules, WorkingTreeScanner

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType

    from structlog.typing import FilteringBoundLogger

    from simplerepo.changes import ChangeRecord
    from simplerepo.repository._models import Credentials
    from simplerepo.repository._transport import ProgressCallback
    from simplerepo.status import StatusRecord
    from simplerepo.store import TreeItem

# Identity used when neither the environment nor any config names one
_DEFAULT_NAME: Final = "simplerepo"
_DEFAULT_EMAIL: Final = "simplerepo@localhost"

_HEADS: Final = "refs/heads/"

type PathArg = str | os.PathLike[str]
type DateLike = datetime | str


def _is_under(path: str, prefix: str) -> bool:
    return not prefix or path == prefix or path.startswith(f"{prefix}/")


def _as_date(value: DateLike | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return parse_date(value)


class SimpleRepository:
    """A git working copy with a small, explicit API.

    Each instance is an independent handle: nothing is global, so several
    repositories can be open in one process. The handle owns the dulwich
    ``Repo`` and should be closed, ideally by using it as a context manager.

    Reads (``status``, ``ls_files``, ``rev_list``) reload the index first
    and so reflect the state on disk when they are called. Mutations of the
    index hold ``index.lock`` for their whole read-modify-write cycle.

    Args:
        repo: An open non-bare dulwich repository.
        config: Configuration; loaded from the standard sources when omitted.
        logger: Logger; built from the logging configuration when omitted.

    Raises:
        NotARepositoryError: If the repository has no working tree.

    Example:
        >>> with SimpleRepository.clone(tmp / "work", "https://example.com/r.git") as repo:
        ...     (repo.root / "notes.txt").write_text("hello\\n")
        ...     repo.add("notes.txt")
        ...     repo.commit("Add notes")
        ...     repo.push()
    """

    def __init__(
        self,
        repo: Repo,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        if repo.bare:
            repo.close()
            msg = f"Repository at {repo.path} has no working tree"
            raise NotARepositoryError(msg, path=Path(repo.path))

        self._repo: Repo = repo
        self._root: Path = Path(repo.path).resolve()
        self._git_dir: Path = Path(repo.controldir())
        self._config: Config = config or Config.load(git_dir=self._git_dir)
        self._logger: FilteringBoundLogger = logger or create_logger(
            level=self._config.logging.level,
            log_format=self._config.logging.format,
            log_file=self._config.logging.file,
            max_bytes=self._config.logging.max_bytes,
            backup_count=self._config.logging.backup_count,
            repository=str(self._root),
        )
        self._owns_logger: bool = logger is None
        self._store: DulwichObjectStore = DulwichObjectStore(repo, logger=self._logger)
        self._scanner: WorkingTreeScanner = WorkingTreeScanner(
            self._root,
            recurse_submodules=self._config.status.recurse_submodules,
            logger=self._logger,
        )
        self._index: IndexStore = IndexStore(
            Path(repo.index_path()), head_tree=self._head_tree, logger=self._logger
        )

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def init(
        cls,
        path: PathArg,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Create a repository at ``path``, or open the one already there.

        The directory is created if needed.

        Raises:
            NotARepositoryError: If ``path`` exists but is not a directory.
            RepositoryIOError: If the repository cannot be created.
        """
        root = Path(path)
        if (root / ".git").exists():
            return cls.existing(root, config=config, logger=logger)
        if root.exists() and not root.is_dir():
            msg = f"Cannot create repository at {root}: not a directory"
            raise NotARepositoryError(msg, path=root)
        try:
            repo = Repo.init(str(root), mkdir=not root.exists())
        except OSError as e:
            msg = f"Cannot create repository at {root}: {e}"
            raise RepositoryIOError(msg, path=root, operation="init") from e
        return cls(repo, config=config, logger=logger)

    @classmethod
    def existing(
        cls,
        path: PathArg,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Open the repository whose working tree is ``path``.

        Raises:
            NotARepositoryError: If ``path`` holds no repository, or only a
                bare one.
        """
        root = Path(path)
        try:
            repo = Repo(str(root))
        except NotGitRepository as e:
            msg = f"Not a git repository: {root}"
            raise NotARepositoryError(msg, path=root) from e
        return cls(repo, config=config, logger=logger)

    @classmethod
    def clone(
        cls,
        dest: PathArg,
        uri: str,
        *,
        remote_name: str = "origin",
        branch: str | None = None,
        credentials: Credentials | None = None,
        progress: ProgressCallback | None = None,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Clone ``uri`` into ``dest`` and open the result.

        Args:
            dest: Directory for the new working tree.
            uri: URL or path of the repository to clone.
            remote_name: Name to give the remote.
            branch: Branch to check out instead of the remote's HEAD.
            credentials: Credentials for HTTP(S) remotes.
            progress: Receives transport progress lines.
            config: Configuration for the opened repository.
            logger: Logger for the clone and the opened repository.

        Raises:
            TransportError: If the clone fails.
        """
        repo = _transport.clone(
            uri,
            Path(dest),
            remote_name=remote_name,
            branch=branch,
            credentials=credentials,
            progress=progress,
            logger=logger,
        )
        return cls(repo, config=config, logger=logger)

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release file handles held by the repository and its log file."""
        self._repo.close()
        if self._owns_logger:
            close_logger(self._logger)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def root(self) -> Path:
        """Resolved working tree root."""
        return self._root

    @property
    def git_dir(self) -> Path:
        return self._git_dir

    @property
    def config(self) -> Config:
        return self._config

    @property
    def store(self) -> DulwichObjectStore:
        return self._store

    @property
    def index(self) -> IndexStore:
        return self._index

    # =========================================================================
    # Refs
    # =========================================================================

    def resolve(self, ref: str) -> str:
        """Resolve a ref name or (abbreviated) commit id to a commit id.

        Raises:
            RefNotFoundError: If nothing matches.
        """
        return self._store.resolve_ref(ref)

    def head(self) -> str | None:
        """Return the commit HEAD points at, or None on an unborn branch."""
        try:
            return self._store.resolve_ref("HEAD")
        except RefNotFoundError:
            return None

    def current_branch(self) -> str | None:
        """Return the checked-out branch name, or None if HEAD is detached."""
        target = self._store.symbolic_target("HEAD")
        if target is None or not target.startswith(_HEADS):
            return None
        return target.removeprefix(_HEADS)

    def _head_tree_id(self) -> str | None:
        head = self.head()
        return self._store.get_commit(head).tree if head is not None else None

    def _head_tree(self) -> Mapping[str, str]:
        return self._store.get_tree(self._head_tree_id())

    # =========================================================================
    # Checkout
    # =========================================================================

    def checkout(
        self,
        commit: str | None = None,
        branch: str | None = None,
        paths: Iterable[PathArg] | None = None,
        *,
        force: bool = False,
    ) -> str | None:
        """Switch branches, detach HEAD, or restore paths.

        With ``paths``, the named files (or everything below named
        directories) are restored from ``commit`` (default HEAD) into the
        index and working tree; HEAD does not move. A path that does not
        exist in the commit is unstaged instead.

        With ``branch``, HEAD is switched to that branch. A branch that does
        not exist locally is created at ``commit`` or, without one, at the
        remote-tracking branch of the same name, which it then tracks.

        With only ``commit``, HEAD is detached at that commit.

        Args:
            commit: Commit or ref to check out or restore from.
            branch: Branch to switch to or create.
            paths: Paths to restore.
            force: Overwrite local changes that conflict with the switch.

        Returns:
            The commit HEAD points at afterwards (the source commit when
            restoring paths).

        Raises:
            RefNotFoundError: If ``commit`` or the tracking branch is missing.
            RepositoryConflictError: If local changes would be overwritten.
            ValueError: If neither ``commit``, ``branch`` nor ``paths`` is given.
        """
        if paths is not None:
            return self._restore_paths(commit, paths)
        if branch is not None:
            return self._switch_branch(branch, commit, force=force)
        if commit is not None:
            target = self.resolve(commit)
            self._update_worktree(target, force=force)
            self._store.detach_head(target)
            self._after_head_moved("checkout_completed", target=target, detached=True)
            return target
        msg = "checkout needs a commit, a branch or paths"
        raise ValueError(msg)

    def _switch_branch(self, branch: str, commit: str | None, *, force: bool) -> str:
        ref = f"{_HEADS}{branch}"
        local = self._store.list_refs(ref)
        tracked_remote: str | None = None
        if ref in local:
            target = local[ref]
        elif commit is not None:
            target = self.resolve(commit)
        else:
            tracked_remote = self._config.remote.name
            target = self.resolve(f"refs/remotes/{tracked_remote}/{branch}")

        self._update_worktree(target, force=force)
        if ref not in local:
            _ = self._store.update_ref(ref, target, expected=None)
        if tracked_remote is not None:
            self._set_tracking(branch, tracked_remote)
        self._store.set_symbolic_ref("HEAD", ref)
        self._after_head_moved("checkout_completed", target=target, branch=branch)
        return target

    def _set_tracking(self, branch: str, remote: str) -> None:
        git_config = self._repo.get_config()
        section = (b"branch", branch.encode("utf-8"))
        git_config.set(section, b"remote", remote.encode("utf-8"))
        git_config.set(section, b"merge", f"{_HEADS}{branch}".encode())
        git_config.write_to_path()

    def _update_worktree(self, target: str, *, force: bool) -> None:
        old = self._store.get_tree_entries(self._head_tree_id())
        new = self._store.get_tree_entries(self._store.get_commit(target).tree)
        changed = sorted(p for p in old.keys() | new.keys() if old.get(p) != new.get(p))
        if not changed:
            return

        if not force:
            # Local changes or untracked files on a path the switch rewrites
            blocked = sorted({r.path for r in self.status()} & set(changed))
            if blocked:
                msg = f"Local changes would be overwritten by checkout: {blocked}"
                raise RepositoryConflictError(msg, ref=target)

        with self._index.transaction():
            for path in changed:
                item = new.get(path)
                if item is not None:
                    self._stage_item(item)
                else:
                    self._delete_file(path)
                    _ = self._index.remove_path(path)

    def _restore_paths(self, commit: str | None, paths: Iterable[PathArg]) -> str:
        source = self.resolve(commit or "HEAD")
        entries = self._store.get_tree_entries(self._store.get_commit(source).tree)
        restored: list[str] = []
        with self._index.transaction():
            for raw in paths:
                prefix = self._scanner.relative(raw)
                matched = [item for p, item in entries.items() if _is_under(p, prefix)]
                if not matched:
                    _ = self._index.remove_path(prefix)
                for item in matched:
                    self._stage_item(item)
                    restored.append(item.path)
        self._logger.info("paths_restored", source=source, paths=restored)
        return source

    def _stage_item(self, item: TreeItem) -> None:
        """Write a tree entry to the working tree and stage it."""
        full = self._scanner.absolute(item.path)
        try:
            if item.mode == S_IFGITLINK:
                full.mkdir(parents=True, exist_ok=True)
                _ = self._index.add_path(item.path, item.blob_hash, mode=item.mode)
                return
            blob = self._repo.object_store[item.blob_hash.encode("ascii")]
            if not isinstance(blob, Blob):
                msg = f"Not a blob: {item.blob_hash}"
                raise RefNotFoundError(msg, ref=item.blob_hash)
            full.parent.mkdir(parents=True, exist_ok=True)
            if full.is_symlink() or full.is_file():
                full.unlink()
            _ = build_file_from_blob(blob, item.mode, os.fsencode(full))
        except OSError as e:
            msg = f"Cannot write {item.path}: {e}"
            raise RepositoryIOError(msg, path=full, operation="checkout") from e
        _ = self._index.add_path(
            item.path, item.blob_hash, self._scanner.stat(item.path), mode=item.mode
        )

    def _delete_file(self, path: str) -> None:
        full = self._scanner.absolute(path)
        try:
            full.unlink(missing_ok=True)
            parent = full.parent
            while parent != self._root and parent.is_dir() and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent
        except OSError as e:
            msg = f"Cannot remove {path}: {e}"
            raise RepositoryIOError(msg, path=full, operation="checkout") from e

    def _after_head_moved(self, event: str, **context: object) -> None:
        self._index.reload()
        self._logger.info(event, **context)

    # =========================================================================
    # Staging
    # =========================================================================

    def add(self, path: PathArg, *, recursive: bool = False) -> frozenset[str]:
        """Stage the current content of a file, or of a directory's files.

        A tracked file that no longer exists is staged as removed. Ignored
        files that are not already tracked are skipped.

        Args:
            path: File or directory, absolute or relative to the root.
            recursive: Required to stage a directory.

        Returns:
            The paths whose index entries were written or removed.

        Raises:
            PathOutsideRepositoryError: If the path is outside the working tree.
            FileNotFoundError: If the path neither exists nor is tracked.
            ValueError: If the path is a directory and ``recursive`` is False.
        """
        rel = self._scanner.relative(path)
        full = self._scanner.absolute(rel)
        is_directory = full.is_dir() and not full.is_symlink()
        is_nested_repo = bool(rel) and (full / ".git").exists()
        if is_directory and not recursive and not is_nested_repo:
            msg = f"'{rel or '.'}' is a directory; pass recursive=True to add it"
            raise ValueError(msg)

        ignore = IgnoreRules(self._root, git_dir=self._git_dir)
        staged: set[str] = set()
        with self._index.transaction():
            if is_directory and recursive:
                candidates = {
                    entry.path
                    for entry in self._scanner.list_files()
                    if _is_under(entry.path, rel)
                }
                candidates.update(
                    entry.path
                    for entry in self._index.tracked_entries()
                    if _is_under(entry.path, rel)
                )
            else:
                candidates = {rel}

            for candidate in sorted(candidates):
                if candidate not in self._index and ignore.is_ignored(candidate):
                    self._logger.debug("path_ignored", path=candidate)
                    continue
                if self._stage_path(candidate):
                    staged.add(candidate)

        self._logger.info("paths_staged", count=len(staged))
        return frozenset(staged)

    def _stage_path(self, path: str) -> bool:
        st = self._scanner.stat(path)
        if st is None:
            if path in self._index:
                return self._index.remove_path(path)
            msg = f"'{path}' did not match any files"
            raise FileNotFoundError(msg)

        if stat.S_ISDIR(st.st_mode):
            commit_id = self._scanner.read_content_hash(path)
            if commit_id is None:
                self._logger.warning("submodule_without_commits", path=path)
                return False
            _ = self._index.add_path(path, commit_id, st, mode=S_IFGITLINK)
            return True

        content = self._scanner.read_content(path)
        if content is None:
            return path in self._index and self._index.remove_path(path)
        blob_hash = self._store.write_blob(content)
        _ = self._index.add_path(path, blob_hash, st)
        return True

    def remove(self, path: PathArg, *, cached: bool = False) -> frozenset[str]:
        """Stage the removal of a tracked file or of every tracked file below a
        directory.

        Args:
            path: File or directory, absolute or relative to the root.
            cached: Keep the files in the working tree.

        Returns:
            The paths removed from the index.

        Raises:
            FileNotFoundError: If nothing tracked matches the path.
        """
        rel = self._scanner.relative(path)
        with self._index.transaction():
            matched = [
                entry.path
                for entry in self._index.tracked_entries()
                if _is_under(entry.path, rel)
            ]
            if not matched:
                msg = f"'{rel}' did not match any tracked files"
                raise FileNotFoundError(msg)
            for match in matched:
                _ = self._index.remove_path(match)
                if not cached:
                    self._delete_file(match)

        self._logger.info("paths_removed", count=len(matched), cached=cached)
        return frozenset(matched)

    # =========================================================================
    # Commit
    # =========================================================================

    def commit(
        self,
        message: str,
        author: Identity | None = None,
        committer: Identity | None = None,
        *,
        allow_empty: bool = False,
    ) -> CommitResult:
        """Record the index as a new commit and move HEAD to it.

        HEAD is moved with a compare-and-swap against the value read at the
        start, so a commit made concurrently by another writer is never
        overwritten.

        Args:
            message: Commit message; a trailing newline is added if missing.
            author: Author identity; resolved from the environment, git
                config and simplerepo config when omitted.
            committer: Committer identity; defaults to the author.
            allow_empty: Commit even if the tree equals the parent's.

        Returns:
            CommitResult with the new id and the paths it changed.

        Raises:
            RepositoryConflictError: If HEAD moved while committing. The new
                commit object exists but nothing points at it.

        Example:
            >>> result = repo.commit("Update configuration")
            >>> if result.no_changes:
            ...     print("Nothing to commit")
        """
        self._index.reload()
        head = self.head()
        parent_tree = self._store.get_commit(head).tree if head is not None else None

        tree = self._store.write_tree(self._index.tree_items())
        files = self._changed_paths(parent_tree, tree)
        if not files and not allow_empty:
            return CommitResult(sha=None, files=frozenset(), no_changes=True)

        author = author or self._default_identity()
        committer = committer or author
        if not message.endswith("\n"):
            message += "\n"

        parents = (head,) if head is not None else ()
        sha = self._store.create_commit(tree, parents, author, committer, message)

        if not self._store.update_ref("HEAD", sha, expected=head):
            actual = self.head()
            msg = (
                f"Concurrent modification detected: expected HEAD={head}, "
                f"found {actual}"
            )
            raise RepositoryConflictError(msg, ref="HEAD", expected=head, actual=actual)

        self._after_head_moved(
            "commit_created", sha=sha, files=len(files), branch=self.current_branch()
        )
        return CommitResult(sha=sha, files=files, no_changes=False)

    def _changed_paths(self, old_tree: str | None, new_tree: str) -> frozenset[str]:
        if old_tree == new_tree:
            return frozenset()
        old = self._store.get_tree(old_tree)
        new = self._store.get_tree(new_tree)
        return frozenset(p for p in old.keys() | new.keys() if old.get(p) != new.get(p))

    def _default_identity(self) -> Identity:
        info = get_author_info(self._repo.get_config_stack())
        return Identity(
            name=info.name or self._config.author.name or _DEFAULT_NAME,
            email=info.email or self._config.author.email or _DEFAULT_EMAIL,
            when=datetime.now().astimezone(),
        )

    # =========================================================================
    # Remotes
    # =========================================================================

    def push(
        self,
        credentials: Credentials | None = None,
        remote_name: str | None = None,
        branch_name: str | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> bool:
        """Push a branch to the branch of the same name on a remote.

        Args:
            credentials: Credentials for HTTP(S) remotes.
            remote_name: Remote to push to; defaults to ``remote.name``.
            branch_name: Branch to push; defaults to ``remote.branch`` or
                the current branch.
            progress: Receives transport progress lines.

        Returns:
            True if the remote accepted the update, False if it refused it.

        Raises:
            RefNotFoundError: If no branch is given and HEAD is detached.
            TransportError: If the push could not be carried out.
        """
        remote = remote_name or self._config.remote.name
        branch = branch_name or self._config.remote.branch or self.current_branch()
        if branch is None:
            msg = "HEAD is detached; name the branch to push"
            raise RefNotFoundError(msg, ref="HEAD")
        return _transport.push(
            self._repo,
            remote,
            branch,
            credentials=credentials,
            progress=progress,
            logger=self._logger,
        )

    def fetch(
        self,
        credentials: Credentials | None = None,
        remote_name: str | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> dict[str, str]:
        """Fetch a remote.

        Returns:
            The remote-tracking refs of that remote after the fetch.

        Raises:
            TransportError: If the fetch could not be carried out.
        """
        remote = remote_name or self._config.remote.name
        _transport.fetch(
            self._repo,
            remote,
            credentials=credentials,
            progress=progress,
            logger=self._logger,
        )
        return self._store.list_refs(f"refs/remotes/{remote}/")

    # =========================================================================
    # Queries
    # =========================================================================

    def ls_files(self, *, include_untracked: bool = False) -> tuple[LsFileEntry, ...]:
        """List the files in the index, ordered by path.

        Args:
            include_untracked: Also list untracked files that are not ignored.
        """
        self._index.reload()
        entries = [
            LsFileEntry(
                path=entry.path,
                blob_hash=entry.blob_hash,
                mode=entry.mode,
                size=entry.size,
                stage_flag=entry.stage_flag,
            )
            for entry in self._index.tracked_entries()
        ]
        if include_untracked:
            ignore = IgnoreRules(self._root, git_dir=self._git_dir)
            entries.extend(
                LsFileEntry(
                    path=work.path,
                    blob_hash=None,
                    mode=work.mode,
                    size=work.size,
                    stage_flag=None,
                )
                for work in self._scanner.list_files()
                if work.path not in self._index and not ignore.is_ignored(work.path)
            )
            entries.sort(key=lambda entry: entry.path)
        return tuple(entries)

    def status(
        self,
        *,
        include_ignored: bool | None = None,
        recurse_submodules: bool | None = None,
    ) -> tuple[StatusRecord, ...]:
        """Classify every path that differs between HEAD, index and working tree.

        Both options default to the ``status`` configuration section.
        """
        status_config = self._config.status
        self._index.reload()
        engine = StatusEngine(
            self._scanner,
            ignore_rules=IgnoreRules(self._root, git_dir=self._git_dir),
            trust_stat_info=status_config.trust_stat_info,
            logger=self._logger,
        )
        return engine.status(
            self._head_tree(),
            self._index.entries(),
            index_mtime_ns=self._index.index_mtime_ns,
            include_ignored=(
                status_config.include_ignored
                if include_ignored is None
                else include_ignored
            ),
            recurse_submodules=(
                status_config.recurse_submodules
                if recurse_submodules is None
                else recurse_submodules
            ),
        )

    def rev_list(
        self,
        start_points: Iterable[str] = (),
        stop_points: Iterable[str] = (),
        *,
        path: str | None = None,
        since: DateLike | None = None,
        until: DateLike | None = None,
        max_count: int = -1,
        topo_order: bool = False,
    ) -> tuple[str, ...]:
        """List commit ids reachable from ``start_points`` (default HEAD).

        Dates may be datetimes or strings accepted by ``parse_date``.
        See RevisionWalker for ordering and filtering rules.
        """
        walker = RevisionWalker(self._store, logger=self._logger)
        return walker.walk(
            self._revision_filter(
                start_points, stop_points, path, since, until, max_count, topo_order
            )
        )

    def whatchanged(
        self,
        start_points: Iterable[str] = (),
        stop_points: Iterable[str] = (),
        *,
        path: str | None = None,
        since: DateLike | None = None,
        until: DateLike | None = None,
        max_count: int = -1,
        topo_order: bool = False,
    ) -> tuple[ChangeRecord, ...]:
        """Describe each commit ``rev_list`` would return and the paths it changed.

        With ``path`` set, only changes at or below that path are listed.
        """
        revision_filter = self._revision_filter(
            start_points, stop_points, path, since, until, max_count, topo_order
        )
        walker = RevisionWalker(self._store, logger=self._logger)
        formatter = ChangeFormatter(
            self._store,
            rename_detector=(
                ExactRenameDetector() if self._config.changes.detect_renames else None
            ),
        )
        return tuple(
            formatter.format(commit_id, path=revision_filter.path)
            for commit_id in walker.iter_walk(revision_filter)
        )

    @staticmethod
    def _revision_filter(
        start_points: Iterable[str],
        stop_points: Iterable[str],
        path: str | None,
        since: DateLike | None,
        until: DateLike | None,
        max_count: int,
        topo_order: bool,  # noqa: FBT001
    ) -> RevisionFilter:
        return RevisionFilter(
            start_points=tuple(start_points),
            stop_points=tuple(stop_points),
            path=path,
            since=_as_date(since),
            until=_as_date(until),
            max_count=max_count,
            topo_order=topo_order,
        )

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r})"
