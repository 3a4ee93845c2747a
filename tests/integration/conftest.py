from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from builders import GraphBuilder
from dulwich.repo import Repo

from simplerepo.config import Config
from simplerepo.repository import SimpleRepository
from simplerepo.utils import create_null_logger

ORIGIN_FILES: dict[str, bytes] = {
    ".gitignore": b"*.log\nbuild/\n",
    "README.md": b"# Demo\n",
    "pyproject.toml": b"[project]\nname = 'demo'\n",
    "src/demo/__init__.py": b"",
    "src/demo/core.py": b"def answer():\n    return 42\n",
    "src/demo/util.py": b"def noop():\n    pass\n",
    "tests/test_core.py": b"def test_answer():\n    assert True\n",
    "docs/index.md": b"Docs\n",
}

type CloneFactory = Callable[..., SimpleRepository]


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def origin(tmp_path: Path) -> Path:
    """A bare repository with a master branch and a feature branch."""
    path = tmp_path / "origin.git"
    bare = Repo.init_bare(str(path), mkdir=True)
    bare.refs.set_symbolic_ref(b"HEAD", b"refs/heads/master")
    graph = GraphBuilder(bare)
    root = graph.commit(ORIGIN_FILES, message="Initial import")
    _ = graph.commit(
        {**ORIGIN_FILES, "docs/feature.md": b"Feature\n"},
        parents=[root],
        at=60,
        message="Document feature",
        ref="refs/heads/feature",
    )
    bare.close()
    return path


@pytest.fixture
def clone_origin(origin: Path, tmp_path: Path) -> Iterator[CloneFactory]:
    """Clone ``origin`` into a fresh directory; clones are closed afterwards."""
    opened: list[SimpleRepository] = []

    def _clone(name: str = "work", **kwargs: object) -> SimpleRepository:
        repo = SimpleRepository.clone(
            tmp_path / name,
            str(origin),
            config=Config.from_dict({}),
            logger=create_null_logger(),
            **kwargs,  # pyright: ignore[reportArgumentType]
        )
        opened.append(repo)
        return repo

    yield _clone
    for repo in opened:
        repo.close()


@pytest.fixture
def work(clone_origin: CloneFactory) -> SimpleRepository:
    return clone_origin()
