import io
from collections.abc import Callable
from typing import cast

import pytest
from rich.console import Console

from simplerepo.cli import create_app


@pytest.fixture
def cli(console: Console) -> Callable[..., int]:
    """Run the CLI with global options and return its exit code."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        return 0

    return _run


@pytest.fixture
def output(console: Console) -> Callable[[], str]:
    """Return everything printed so far and start over."""

    def _read() -> str:
        buffer = cast("io.StringIO", console.file)
        text = buffer.getvalue()
        _ = buffer.seek(0)
        _ = buffer.truncate()
        return text

    return _read
