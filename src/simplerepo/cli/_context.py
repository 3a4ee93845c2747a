"""CLI context for global state management.

The CLIContext is set once by the top-level command from the global options
and read by every subcommand through a context variable.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from simplerepo.config import Config

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_current_cli_context: contextvars.ContextVar[CLIContext | None] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI options and the configuration they produced.

    Attributes:
        config: Loaded configuration object.
        repo_path: Working tree the commands operate on.
        config_path: Explicit config file given with ``--config``.
        verbose: Show progress and additional details.
        logger: Structured logger for the repository layer.
        console: Console for normal output.
        error_console: Console for errors.
    """

    config: Config = field(repr=False)
    repo_path: Path = field(default_factory=Path.cwd)
    config_path: Path | None = None
    verbose: bool = False
    logger: FilteringBoundLogger | None = field(default=None, repr=False)
    console: Console = field(default_factory=Console, repr=False)
    error_console: Console = field(
        default_factory=lambda: Console(stderr=True), repr=False
    )

    @classmethod
    def get_current(cls) -> CLIContext:
        """Get the active CLIContext, or a default one if none is set."""
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx
        return cls(config=Config.from_dict({}))

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        _ = _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to the default context, mainly for test isolation."""
        _ = _current_cli_context.set(None)
