# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Commands that walk the commit history."""

from typing import Annotated

from cyclopts import Parameter
from rich.markup import escape

from simplerepo.changes import render
from simplerepo.cli._context import CLIContext
from simplerepo.cli._shared import open_repository, reporting_errors

_Path = Annotated[
    str | None, Parameter(name="--path", help="Only commits touching this path")
]
_Since = Annotated[
    str | None,
    Parameter(name=["--since", "--after"], help="Only commits on or after this date"),
]
_Until = Annotated[
    str | None,
    Parameter(name=["--until", "--before"], help="Only commits on or before this date"),
]
_MaxCount = Annotated[
    int, Parameter(name=["--max-count", "-n"], help="Limit the number of commits")
]
_TopoOrder = Annotated[
    bool, Parameter(name="--topo-order", help="Show no parent before its children")
]


def split_revisions(revisions: tuple[str, ...]) -> tuple[list[str], list[str]]:
    """Split ``rev-list`` arguments into start and stop points.

    ``^X`` excludes X and its ancestors, and ``A..B`` means ``B ^A``.

    Raises:
        ValueError: For a symmetric difference ``A...B``, which has no start
            and stop form.
    """
    starts: list[str] = []
    stops: list[str] = []
    for revision in revisions:
        if revision.startswith("^"):
            stops.append(revision[1:])
        elif "..." in revision:
            msg = f"Symmetric difference ranges are not supported: '{revision}'"
            raise ValueError(msg)
        elif ".." in revision:
            stop, _, start = revision.partition("..")
            stops.append(stop or "HEAD")
            starts.append(start or "HEAD")
        else:
            starts.append(revision)
    return starts, stops


def rev_list_command(
    revisions: tuple[str, ...] = (),
    *,
    path: _Path = None,
    since: _Since = None,
    until: _Until = None,
    max_count: _MaxCount = -1,
    topo_order: _TopoOrder = False,
) -> None:
    """List commits in reverse chronological order

    Args:
        revisions: Start points, ``^stop`` exclusions or ``stop..start`` ranges.
    """
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        starts, stops = split_revisions(revisions)
        for commit_id in repo.rev_list(
            starts,
            stops,
            path=path,
            since=since,
            until=until,
            max_count=max_count,
            topo_order=topo_order,
        ):
            console.print(commit_id, highlight=False)


def whatchanged_command(
    revisions: tuple[str, ...] = (),
    *,
    path: _Path = None,
    since: _Since = None,
    until: _Until = None,
    max_count: _MaxCount = -1,
    topo_order: _TopoOrder = False,
) -> None:
    """Show commit logs with the paths each commit changed

    Args:
        revisions: Start points, ``^stop`` exclusions or ``stop..start`` ranges.
    """
    console = CLIContext.get_current().console
    with open_repository() as repo, reporting_errors():
        starts, stops = split_revisions(revisions)
        records = repo.whatchanged(
            starts,
            stops,
            path=path,
            since=since,
            until=until,
            max_count=max_count,
            topo_order=topo_order,
        )
        for position, record in enumerate(records):
            if position:
                console.print()
            console.print(
                escape(render(record).rstrip("\n")), highlight=False, soft_wrap=True
            )
