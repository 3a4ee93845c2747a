"""Configuration models.

Each TOML section maps onto a frozen Pydantic model. Unknown keys are ignored
so that newer config files still load with older releases.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from pathlib import Path


class LogLevel(StrEnum):
    """Log level threshold values, most verbose first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Configuration source names, highest precedence first."""

    ENV = "env"
    REPOSITORY = "repository"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """A configuration source that took part in a load.

    Attributes:
        name: The source type identifier.
        path: Path to the config file, or None for non-file sources.
        exists: Whether the source exists.
        values: Configuration values read from this source.
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]  # pyright: ignore[reportExplicitAny]


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
        max_bytes: Size in bytes at which the log file is rotated. Rotation
            needs ``backup_count`` too.
        backup_count: Number of rotated log files to keep.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    file: str = ""
    max_bytes: int | None = None
    backup_count: int | None = None


class StatusConfig(BaseModel):
    """Status engine configuration section.

    Attributes:
        trust_stat_info: Trust matching size and mtime instead of hashing.
        include_ignored: Report ignored untracked files by default.
        recurse_submodules: Scan into nested repositories by default.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    trust_stat_info: bool = True
    include_ignored: bool = False
    recurse_submodules: bool = False


class ChangesConfig(BaseModel):
    """Change formatting configuration section."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    detect_renames: bool = True


class RemoteConfig(BaseModel):
    """Default remote used by clone, fetch and push.

    Attributes:
        name: Remote name.
        branch: Branch to push; empty means the current branch.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = "origin"
    branch: str = ""


class AuthorConfig(BaseModel):
    """Commit identity used when neither environment nor git config set one."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    email: str = ""
