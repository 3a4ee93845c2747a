"""Logging utilities for simplerepo.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to stderr or to a log file. Each logger
is self-contained and does not modify global structlog configuration, so the
library never changes logging behaviour of the application embedding it.
"""

import itertools
import logging
import sys
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

_file_logger_ids = itertools.count()


def _log_level_from_string(level: str, *, respect_env: bool = True) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, SIMPLEREPO_DEBUG overrides to DEBUG level and
            SIMPLEREPO_LOG_LEVEL overrides the given level.

    Returns:
        The logging level as an integer.
    """
    if respect_env:
        if getenv("SIMPLEREPO_DEBUG", None):
            return logging.DEBUG
        level = getenv("SIMPLEREPO_LOG_LEVEL", level)

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def create_logger(
    *,
    level: str = "warning",
    log_format: LogFormatType = "text",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
    **context: object,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    Logs go to ``log_file`` when given, otherwise to stderr. A log file is
    written through its own stdlib handler, rotated by ``RotatingFileHandler``
    when both ``max_bytes`` and ``backup_count`` are set. Release the file
    with ``close_logger``.

    The log level can be overridden by environment variables:
    - SIMPLEREPO_DEBUG: If set, enables DEBUG level logging
    - SIMPLEREPO_LOG_LEVEL: Replaces the configured level

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to a log file; empty writes to stderr.
        max_bytes: Maximum size in bytes before rotation.
        backup_count: Number of rotated log files to keep.
        **context: Key/value pairs bound to every log entry.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = _log_level_from_string(level)

    raw_logger: object
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        stdlib_logger = logging.getLogger(
            f"simplerepo.file.{log_path.stem}.{next(_file_logger_ids)}"
        )
        stdlib_logger.propagate = False
        stdlib_logger.setLevel(effective_level)

        handler: logging.FileHandler
        if max_bytes is not None and backup_count is not None:
            handler = RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        else:
            handler = logging.FileHandler(log_path)
        handler.setLevel(effective_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        stdlib_logger.addHandler(handler)
        raw_logger = stdlib_logger
    else:
        raw_logger = structlog.PrintLoggerFactory(file=sys.stderr)()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )
    if context:
        return logger.bind(**context)
    return logger


def create_null_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger that discards every event.

    Components use this when no logger is injected.

    Returns:
        A FilteringBoundLogger that drops all events.
    """
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[],
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
            context_class=dict,
        ),
    )


def close_logger(logger: "FilteringBoundLogger") -> None:  # noqa: UP037
    """Close the file handlers behind a logger made by ``create_logger``.

    Loggers writing to stderr, and loggers from elsewhere, are left alone.
    """
    raw_logger = getattr(logger, "_logger", None)
    if not isinstance(raw_logger, logging.Logger):
        return
    for handler in list(raw_logger.handlers):
        raw_logger.removeHandler(handler)
        handler.close()
