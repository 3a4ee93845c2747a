"""Config file discovery."""

from pathlib import Path

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models import ConfigSource, ConfigSourceName

REPOSITORY_CONFIG_NAME = "simplerepo.toml"


def get_user_config_path() -> Path:
    """Get the platform-specific user config file path.

    On Linux this is ``~/.config/simplerepo/config.toml``. The path is
    returned whether or not it exists.
    """
    return platformdirs.user_config_path("simplerepo") / "config.toml"


def _file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    *,
    git_dir: Path | None = None,
    config_path: Path | None = None,
    include_env: bool = True,
) -> list[ConfigSource]:
    """Discover configuration sources, highest precedence first.

    File sources are listed even when missing (``exists=False``); their
    values are read by the loader.

    Args:
        git_dir: The repository's git directory, if any.
        config_path: Explicit config file used instead of the repository one.
        include_env: Include environment variables as a source.

    Returns:
        List of ConfigSource objects, highest precedence first.
    """
    sources: list[ConfigSource] = []

    if include_env:
        sources.append(
            ConfigSource(name=ConfigSourceName.ENV, path=None, exists=True, values={})
        )

    repo_path = config_path
    if repo_path is None and git_dir is not None:
        repo_path = git_dir / REPOSITORY_CONFIG_NAME
    if repo_path is not None:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.REPOSITORY,
                path=repo_path,
                exists=_file_exists(repo_path),
                values={},
            )
        )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )
    return sources
