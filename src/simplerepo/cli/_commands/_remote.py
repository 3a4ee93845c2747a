# pyright: reportUnusedCallResult=false
# ruff: noqa: D415, TC003  # Path needed at runtime for cyclopts parameter parsing
"""Commands that talk to remotes."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter
from rich.markup import escape

from simplerepo.cli._context import CLIContext
from simplerepo.cli._shared import (
    ExitCode,
    credentials_from,
    exit_with_error,
    open_repository,
    reporting_errors,
)
from simplerepo.repository import ProgressCallback, SimpleRepository

_Username = Annotated[
    str | None, Parameter(name=["--username", "-u"], help="Username for HTTP(S)")
]
_Password = Annotated[
    str | None,
    Parameter(
        name="--password",
        env_var="SIMPLEREPO_PASSWORD",
        help="Password or token for HTTP(S)",
    ),
]


def _progress() -> ProgressCallback | None:
    ctx = CLIContext.get_current()
    if not ctx.verbose:
        return None
    return lambda line: ctx.error_console.print(f"[dim]{escape(line)}[/dim]")


def clone_command(
    uri: str,
    dest: Path | None = None,
    *,
    branch: Annotated[
        str | None, Parameter(name=["--branch", "-b"], help="Branch to check out")
    ] = None,
    origin: Annotated[
        str, Parameter(name=["--origin", "-o"], help="Name for the remote")
    ] = "origin",
    username: _Username = None,
    password: _Password = None,
) -> None:
    """Clone a repository into a new directory

    Args:
        uri: URL or path of the repository to clone.
        dest: Target directory; defaults to the last part of the URI.
    """
    ctx = CLIContext.get_current()
    target = dest or Path(uri.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git"))
    with reporting_errors():
        repo = SimpleRepository.clone(
            target,
            uri,
            remote_name=origin,
            branch=branch,
            credentials=credentials_from(username, password),
            progress=_progress(),
            config=ctx.config,
            logger=ctx.logger,
        )
    with repo:
        ctx.console.print(f"Cloned {escape(uri)} into {escape(str(repo.root))}")


def push_command(
    *,
    remote: Annotated[
        str | None, Parameter(name="--remote", help="Remote to push to")
    ] = None,
    branch: Annotated[
        str | None, Parameter(name=["--branch", "-b"], help="Branch to push")
    ] = None,
    username: _Username = None,
    password: _Password = None,
) -> None:
    """Push a branch to a remote"""
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        accepted = repo.push(
            credentials_from(username, password),
            remote,
            branch,
            progress=_progress(),
        )
    if not accepted:
        exit_with_error("Push was rejected by the remote", ExitCode.CONFLICT)
    console.print("[green]Push accepted[/green]")


def fetch_command(
    *,
    remote: Annotated[
        str | None, Parameter(name="--remote", help="Remote to fetch from")
    ] = None,
    username: _Username = None,
    password: _Password = None,
) -> None:
    """Download refs and objects from a remote"""
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        refs = repo.fetch(
            credentials_from(username, password),
            remote,
            progress=_progress(),
        )
    for ref, sha in sorted(refs.items()):
        console.print(f"{sha[:12]} {escape(ref)}", highlight=False)
