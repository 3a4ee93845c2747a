"""Shared utilities: logging, dates and author resolution."""

from ._author import AuthorInfo, get_author_info
from ._dates import ensure_aware, from_git_time, parse_date, to_git_time
from ._logging import LogFormatType, close_logger, create_logger, create_null_logger

__all__ = [
    "AuthorInfo",
    "LogFormatType",
    "close_logger",
    "create_logger",
    "create_null_logger",
    "ensure_aware",
    "from_git_time",
    "get_author_info",
    "parse_date",
    "to_git_time",
]
