from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from dulwich.config import ConfigFile

from simplerepo.utils import AuthorInfo, get_author_info

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _git_config(name: str | None = None, email: str | None = None) -> ConfigFile:
    config = ConfigFile()
    if name is not None:
        config.set((b"user",), b"name", name.encode())
    if email is not None:
        config.set((b"user",), b"email", email.encode())
    return config


class TestGetAuthorInfo:
    def test_reads_git_config(self) -> None:
        info = get_author_info(_git_config("Ada", "ada@example.com"))

        assert info == AuthorInfo(name="Ada", email="ada@example.com")

    def test_environment_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIMPLEREPO_AUTHOR_NAME", "Grace")
        monkeypatch.setenv("SIMPLEREPO_AUTHOR_EMAIL", "grace@example.com")

        info = get_author_info(_git_config("Ada", "ada@example.com"))

        assert info == AuthorInfo(name="Grace", email="grace@example.com")

    def test_missing_values_are_none(self) -> None:
        assert get_author_info(_git_config()) == AuthorInfo(name=None, email=None)

    def test_no_config(self) -> None:
        assert get_author_info(None) == AuthorInfo(name=None, email=None)

    def test_blank_value_is_none(self) -> None:
        assert get_author_info(_git_config(name="   ")).name is None

    def test_mixed_sources(
        self, monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
    ) -> None:
        monkeypatch.setenv("SIMPLEREPO_AUTHOR_EMAIL", "env@example.com")
        config = mocker.MagicMock()
        config.get.return_value = b"Config Name"

        info = get_author_info(config)

        assert info.name == "Config Name"
        assert info.email == "env@example.com"
