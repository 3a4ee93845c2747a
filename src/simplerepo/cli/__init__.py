"""Utilities used by the simplerepo CLI."""

from ._app import app, create_app, main
from ._context import CLIContext
from ._shared import ExitCode, exit_code_for, exit_with_error

__all__ = [
    "CLIContext",
    "ExitCode",
    "app",
    "create_app",
    "exit_code_for",
    "exit_with_error",
    "main",
]
