"""simplerepo CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._history import rev_list_command, split_revisions, whatchanged_command
from ._remote import clone_command, fetch_command, push_command
from ._worktree import (
    add_command,
    checkout_command,
    commit_command,
    init_command,
    ls_files_command,
    rm_command,
    status_command,
)

if TYPE_CHECKING:
    from cyclopts import App

__all__ = ["register_commands", "split_revisions"]


def register_commands(app: App) -> None:
    app.command(init_command, name="init")
    app.command(clone_command, name="clone")
    app.command(status_command, name="status")
    app.command(add_command, name="add")
    app.command(rm_command, name="rm")
    app.command(commit_command, name="commit")
    app.command(push_command, name="push")
    app.command(fetch_command, name="fetch")
    app.command(checkout_command, name="checkout")
    app.command(ls_files_command, name="ls-files")
    app.command(rev_list_command, name="rev-list")
    app.command(whatchanged_command, name="whatchanged")
