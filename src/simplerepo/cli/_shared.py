"""Shared CLI utilities for commands.

This module provides what every command needs:
- Standardized exit codes and the mapping from library errors to them
- Console helpers for errors
- Opening the repository named by the global options
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, Never

from rich.markup import escape

from simplerepo.exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    IndexCorruptError,
    LockHeldError,
    NotARepositoryError,
    PathOutsideRepositoryError,
    RefNotFoundError,
    RepositoryConflictError,
    SimpleRepoError,
    TransportError,
)
from simplerepo.repository import Credentials, SimpleRepository
from simplerepo.store import Identity

from ._context import CLIContext

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

__all__ = [
    "ExitCode",
    "credentials_from",
    "exit_code_for",
    "exit_with_error",
    "get_error_console",
    "open_repository",
    "parse_identity",
    "reporting_errors",
]

_IDENTITY = re.compile(r"\s*(?P<name>[^<]*?)\s*<(?P<email>[^>]*)>\s*")


class ExitCode(IntEnum):
    """Standard exit codes for simplerepo commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    CONFLICT = 6
    TRANSPORT_ERROR = 7


def exit_code_for(error: BaseException) -> ExitCode:
    """Map a library error onto the exit code a command reports for it."""
    match error:
        case ConfigLoadError():
            return ExitCode.LOAD_ERROR
        case ConfigValidationError() | PathOutsideRepositoryError():
            return ExitCode.VALIDATION_ERROR
        case NotARepositoryError() | RefNotFoundError() | FileNotFoundError():
            return ExitCode.NOT_FOUND
        case RepositoryConflictError() | LockHeldError():
            return ExitCode.CONFLICT
        case TransportError():
            return ExitCode.TRANSPORT_ERROR
        case IndexCorruptError() | OSError():
            return ExitCode.IO_ERROR
        case ValueError():
            return ExitCode.VALIDATION_ERROR
        case _:
            return ExitCode.INTERNAL_ERROR


def get_error_console() -> Console:
    """Return the error console of the current CLI context."""
    return CLIContext.get_current().error_console


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn library errors raised inside the block into an error exit."""
    try:
        yield
    except (SimpleRepoError, OSError, ValueError) as e:
        logger = CLIContext.get_current().logger
        if logger is not None:
            logger.debug("command_failed", error=type(e).__name__, message=str(e))
        exit_with_error(str(e), exit_code_for(e))


def open_repository() -> SimpleRepository:
    """Open the repository named by ``--repo`` (default: current directory).

    Raises:
        SystemExit: If there is no repository there.
    """
    ctx = CLIContext.get_current()
    with reporting_errors():
        return SimpleRepository.existing(
            ctx.repo_path, config=ctx.config, logger=ctx.logger
        )


def parse_identity(value: str) -> Identity:
    """Parse ``Name <email>`` into an identity dated now.

    Raises:
        ValueError: If the value is not in that form.
    """
    match = _IDENTITY.fullmatch(value)
    if match is None or not match["name"]:
        msg = f"Expected 'Name <email>', got {value!r}"
        raise ValueError(msg)
    return Identity(
        name=match["name"], email=match["email"], when=datetime.now().astimezone()
    )


def credentials_from(username: str | None, password: str | None) -> Credentials | None:
    if username is None:
        return None
    return Credentials(username=username, password=password or "")
