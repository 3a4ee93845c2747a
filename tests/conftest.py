"""Shared test fixtures for simplerepo tests."""

import io
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from builders import GraphBuilder
from rich.console import Console

from simplerepo.config import Config
from simplerepo.repository import SimpleRepository
from simplerepo.utils import create_null_logger


@pytest.fixture(autouse=True)
def _isolated_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep the user's config, git identity and SIMPLEREPO_* variables out."""
    for key in list(os.environ):
        if key.startswith("SIMPLEREPO_"):
            monkeypatch.delenv(key)

    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setattr(
        "simplerepo.config._discovery.get_user_config_path",
        lambda: home / "simplerepo" / "config.toml",
    )


@pytest.fixture
def console() -> Console:
    """A console that records output instead of printing it."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def graph() -> GraphBuilder:
    """An in-memory repository to write commit graphs into."""
    return GraphBuilder()


@pytest.fixture
def repo(tmp_path: Path) -> Iterator[SimpleRepository]:
    """A fresh on-disk repository with default configuration."""
    with SimpleRepository.init(
        tmp_path / "work", config=Config.from_dict({}), logger=create_null_logger()
    ) as repository:
        yield repository
