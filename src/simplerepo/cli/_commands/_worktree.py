# pyright: reportUnusedCallResult=false
# ruff: noqa: D415, FBT002, TC003  # Path needed at runtime for cyclopts parameter parsing
"""Commands that work on the index and working tree."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter
from rich.markup import escape

from simplerepo.cli._context import CLIContext
from simplerepo.cli._shared import (
    open_repository,
    parse_identity,
    reporting_errors,
)
from simplerepo.enums import IndexStatus, RepoStatus
from simplerepo.repository import SimpleRepository

_INDEX_STYLE = {
    IndexStatus.ADDED: "green",
    IndexStatus.MODIFIED: "green",
    IndexStatus.REMOVED: "red",
    IndexStatus.UNTRACKED: "cyan",
}


def init_command(path: Path | None = None) -> None:
    """Create an empty repository, or reopen an existing one

    Args:
        path: Directory for the repository; defaults to --repo.
    """
    ctx = CLIContext.get_current()
    target = path or ctx.repo_path
    with reporting_errors(), SimpleRepository.init(
        target, config=ctx.config, logger=ctx.logger
    ) as repo:
        ctx.console.print(f"Initialized repository in {escape(str(repo.git_dir))}")


def status_command(
    *,
    ignored: Annotated[
        bool, Parameter(name="--ignored", help="Also show ignored files")
    ] = False,
) -> None:
    """Show paths that differ between HEAD, the index and the working tree"""
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        records = repo.status(include_ignored=ignored or None)

        branch = repo.current_branch()
        console.print(
            f"On branch {escape(branch)}" if branch else "[yellow]HEAD detached[/yellow]"
        )
        if not records:
            console.print("[dim]Nothing to commit, working tree clean[/dim]")
            return

        for record in records:
            style = _INDEX_STYLE.get(record.index_status, "default")
            repo_status = (
                "" if record.repo_status is RepoStatus.UNCHANGED else record.repo_status
            )
            console.print(
                f"[{style}]{record.index_status:<10}[/{style}]"
                f" {repo_status:<10} {escape(record.path)}",
                highlight=False,
            )


def add_command(
    paths: tuple[str, ...],
    *,
    recursive: Annotated[
        bool, Parameter(name=["--recursive", "-r"], help="Add directories recursively")
    ] = False,
) -> None:
    """Stage the current content of files

    Args:
        paths: Files or directories to stage.
    """
    ctx = CLIContext.get_current()
    with open_repository() as repo, reporting_errors():
        staged: set[str] = set()
        for path in paths:
            staged |= repo.add(path, recursive=recursive)
        if ctx.verbose:
            for path in sorted(staged):
                ctx.console.print(f"add '{escape(path)}'", highlight=False)


def rm_command(
    paths: tuple[str, ...],
    *,
    cached: Annotated[
        bool, Parameter(name="--cached", help="Keep the files in the working tree")
    ] = False,
) -> None:
    """Stage the removal of tracked files

    Args:
        paths: Files or directories to remove.
    """
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        for path in paths:
            for removed in sorted(repo.remove(path, cached=cached)):
                console.print(f"rm '{escape(removed)}'", highlight=False)


def commit_command(
    *,
    message: Annotated[str, Parameter(name=["--message", "-m"], help="Commit message")],
    author: Annotated[
        str | None, Parameter(name="--author", help="Author as 'Name <email>'")
    ] = None,
    allow_empty: Annotated[
        bool, Parameter(name="--allow-empty", help="Commit even without changes")
    ] = False,
) -> None:
    """Record the staged changes as a new commit"""
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        identity = parse_identity(author) if author else None
        result = repo.commit(message, identity, allow_empty=allow_empty)

        if result.no_changes:
            console.print("[dim]Nothing to commit[/dim]")
            return

        console.print(f"[green]Committed {len(result.files)} file(s)[/green]")
        console.print(f"[dim]SHA: {result.sha}[/dim]")


def checkout_command(
    target: str | None = None,
    *,
    branch: Annotated[
        str | None, Parameter(name=["--branch", "-b"], help="Branch to switch to")
    ] = None,
    path: Annotated[
        tuple[str, ...] | None,
        Parameter(name=["--path", "-p"], help="Restore this path from the commit"),
    ] = None,
    force: Annotated[
        bool, Parameter(name=["--force", "-f"], help="Discard conflicting changes")
    ] = False,
) -> None:
    """Switch branches, detach HEAD at a commit, or restore paths

    A target naming a local or remote-tracking branch switches to that
    branch; any other target detaches HEAD.

    Args:
        target: Branch or commit.
    """
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        if path:
            source = repo.checkout(commit=target, paths=path)
            console.print(f"Restored {len(path)} path(s) from {source}")
            return

        if branch is None and target is not None and _is_branch(repo, target):
            branch, target = target, None
        head = repo.checkout(commit=target, branch=branch, force=force)
        if branch is not None:
            console.print(f"Switched to branch '{escape(branch)}'")
        else:
            console.print(f"HEAD is now at {head}")


def _is_branch(repo: SimpleRepository, name: str) -> bool:
    remote = repo.config.remote.name
    refs = repo.store.list_refs("refs/")
    return f"refs/heads/{name}" in refs or f"refs/remotes/{remote}/{name}" in refs


def ls_files_command(
    *,
    untracked: Annotated[
        bool, Parameter(name=["--others", "-o"], help="Also list untracked files")
    ] = False,
    stage: Annotated[
        bool, Parameter(name=["--stage", "-s"], help="Show mode and object id")
    ] = False,
) -> None:
    """List the files in the index"""
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        for entry in repo.ls_files(include_untracked=untracked):
            if stage and entry.blob_hash is not None:
                line = f"{entry.mode:06o} {entry.blob_hash} 0\t{entry.path}"
            else:
                line = entry.path
            console.print(escape(line), highlight=False, soft_wrap=True)
