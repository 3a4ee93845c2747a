# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""The command-line interface for simplerepo."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from simplerepo.config import Config, ConfigError
from simplerepo.utils import create_logger

from ._commands import register_commands
from ._context import CLIContext
from ._shared import exit_code_for, exit_with_error

_HELP = "A small git porcelain: status, staging, commits, history and remotes."


def _load_config(repo: Path, config: Path | None, console: Console) -> Config:
    git_dir = repo / ".git"
    try:
        return Config.load(
            git_dir=git_dir if git_dir.is_dir() else None, config_path=config
        )
    except (ConfigError, FileNotFoundError) as e:
        exit_with_error(str(e), exit_code_for(e), console=console)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the CLI application.

    Global options are handled by ``app.meta``; run the CLI with
    ``app.meta(tokens)`` so that they are applied.

    Args:
        console: Console for command output.
        error_console: Console for errors.
        exit_on_error: Exit on argument errors instead of raising.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="simplerepo",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        repo: Annotated[
            Path | None,
            Parameter(name=["--repo", "-C"], help="Working tree to operate on"),
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        verbose: Annotated[
            bool, Parameter(name=["--verbose", "-v"], help="Enable verbose output")
        ] = False,
    ) -> None:
        """Run simplerepo with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            repo: Working tree to operate on (default: current directory).
            config: Explicit config file, replacing ``.git/simplerepo.toml``.
            verbose: Show progress and log at info level.
        """
        repo_path = (repo or Path.cwd()).resolve()
        loaded_config = _load_config(repo_path, config, error_console)

        level = loaded_config.logging.level.value
        if verbose and level not in {"debug", "info"}:
            level = "info"
        logger = create_logger(
            level=level,
            log_format=loaded_config.logging.format.value,  # type: ignore[arg-type]
            log_file=loaded_config.logging.file,
            max_bytes=loaded_config.logging.max_bytes,
            backup_count=loaded_config.logging.backup_count,
        )

        CLIContext.set_current(
            CLIContext(
                config=loaded_config,
                repo_path=repo_path,
                config_path=config,
                verbose=verbose,
                logger=logger,
                console=console,
                error_console=error_console,
            )
        )
        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `simplerepo` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
