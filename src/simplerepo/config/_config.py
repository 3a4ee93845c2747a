# pyright: reportExplicitAny=false, reportAny=false
"""Configuration container with typed access."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from simplerepo.config._defaults import DEFAULT_CONFIG
from simplerepo.config._loader import deep_merge, parse_env_vars, read_toml_file
from simplerepo.config._models import (
    AuthorConfig,
    ChangesConfig,
    ConfigSource,
    ConfigSourceName,
    LoggingConfig,
    RemoteConfig,
    StatusConfig,
)
from simplerepo.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Self


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods rather than the constructor so that defaults are
    merged in and errors are reported as ConfigValidationError.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    status: StatusConfig = StatusConfig()
    changes: ChangesConfig = ChangesConfig()
    remote: RemoteConfig = RemoteConfig()
    author: AuthorConfig = AuthorConfig()

    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, source: str | None = None) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.
            source: Name of the source, used in error messages.

        Returns:
            Validated configuration.

        Raises:
            ConfigValidationError: If a value has the wrong type.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            errors = tuple(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            where = f" in {source}" if source else ""
            msg = f"Invalid configuration{where}: {'; '.join(errors)}"
            raise ConfigValidationError(msg, source=source, errors=errors) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a single file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        config = cls.from_dict(data, source=str(path))
        config._sources = (  # noqa: SLF001
            ConfigSource(
                name=ConfigSourceName.REPOSITORY, path=path, exists=True, values=data
            ),
        )
        return config

    @classmethod
    def load(
        cls,
        *,
        git_dir: Path | None = None,
        config_path: Path | None = None,
        include_env: bool = True,
    ) -> Self:
        """Load merged configuration from all sources.

        Precedence, lowest first: defaults, user file, repository file
        (``<git_dir>/simplerepo.toml``, or ``config_path`` when given), then
        ``SIMPLEREPO_SECTION__KEY`` environment variables.

        Args:
            git_dir: The repository's git directory, if any.
            config_path: Explicit config file replacing the repository file.
                It must exist.
            include_env: Include environment variables as a source.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If ``config_path`` does not exist.
            ConfigLoadError: If a config file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        from simplerepo.config._discovery import discover_sources  # noqa: PLC0415

        if config_path is not None and not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)

        sources = discover_sources(
            git_dir=git_dir, config_path=config_path, include_env=include_env
        )

        merged: dict[str, Any] = {}
        loaded: list[ConfigSource] = []
        for source in reversed(sources):
            values = source.values
            if source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path is not None and source.exists:
                values = read_toml_file(source.path)

            loaded.append(
                ConfigSource(
                    name=source.name, path=source.path, exists=source.exists, values=values
                )
            )
            if values:
                merged = deep_merge(merged, values)

        config = cls.from_dict(merged)
        config._sources = tuple(reversed(loaded))  # noqa: SLF001
        return config

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed, highest precedence first."""
        return list(self._sources)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> Config().get("remote.name")
            'origin'
            >>> Config().get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self.model_dump(mode="json")
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current
