"""simplerepo configuration.

Loading, merging and typed access to configuration values.

Example:
    >>> from simplerepo.config import Config
    >>> config = Config.load()
    >>> config.remote.name
    'origin'
"""

from simplerepo.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._config import Config
from ._defaults import DEFAULT_CONFIG
from ._discovery import discover_sources, get_user_config_path
from ._loader import deep_merge, parse_env_vars, parse_string_value, read_toml_file
from ._models import (
    AuthorConfig,
    ChangesConfig,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RemoteConfig,
    StatusConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "AuthorConfig",
    "ChangesConfig",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RemoteConfig",
    "StatusConfig",
    "deep_merge",
    "discover_sources",
    "get_user_config_path",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
]
