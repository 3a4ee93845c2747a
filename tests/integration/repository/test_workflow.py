"""End-to-end workflows against a local bare remote."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from builders import write_file
from dulwich.repo import Repo

from simplerepo.enums import ChangeKind, IndexStatus, RepoStatus
from simplerepo.exceptions import TransportError
from simplerepo.repository import SimpleRepository

if TYPE_CHECKING:
    from integration.conftest import CloneFactory


def _remote_head(origin: Path, branch: str = "master") -> str:
    with Repo(str(origin)) as bare:
        return bare.refs[f"refs/heads/{branch}".encode()].decode()


def _statuses(repo: SimpleRepository) -> dict[str, tuple[IndexStatus, RepoStatus]]:
    return {r.path: (r.index_status, r.repo_status) for r in repo.status()}


class TestCloneEditPush:
    def test_fresh_clone_is_clean(self, work: SimpleRepository, origin: Path) -> None:
        assert len(work.ls_files()) == 8
        assert work.status() == ()
        assert work.current_branch() == "master"
        assert work.head() == _remote_head(origin)
        assert (work.root / "src" / "demo" / "core.py").read_text().startswith("def")

    def test_round_trip(self, work: SimpleRepository, origin: Path) -> None:
        history = work.rev_list()
        write_file(work.root, "new.txt", "new\n")
        assert _statuses(work) == {"new.txt": (IndexStatus.UNTRACKED, RepoStatus.UNTRACKED)}

        _ = work.add("new.txt")
        assert _statuses(work) == {"new.txt": (IndexStatus.ADDED, RepoStatus.UNTRACKED)}

        result = work.commit("Add new file")
        assert result.files == {"new.txt"}
        assert len(work.ls_files()) == 9
        assert work.status() == ()

        assert work.push()
        assert _remote_head(origin) == result.sha

        assert work.rev_list() == (result.sha, *history)
        record = work.whatchanged(max_count=1)[0]
        assert record.subject == "Add new file"
        assert [(c.path, c.change_kind) for c in record.path_changes] == [
            ("new.txt", ChangeKind.ADDED)
        ]

    def test_ignored_files_stay_out(self, work: SimpleRepository) -> None:
        write_file(work.root, "debug.log", "noise")
        write_file(work.root, "build/out.bin", b"\x00\x01")

        assert work.status() == ()
        assert {r.path for r in work.status(include_ignored=True)} == {
            "debug.log",
            "build/out.bin",
        }
        assert not {"debug.log", "build/out.bin"} & work.add(".", recursive=True)

    def test_modify_remove_and_commit(self, work: SimpleRepository) -> None:
        write_file(work.root, "README.md", "# Changed\n")
        _ = work.remove("docs/index.md")
        _ = work.add("README.md")

        assert _statuses(work) == {
            "README.md": (IndexStatus.MODIFIED, RepoStatus.UNCHANGED),
            "docs/index.md": (IndexStatus.REMOVED, RepoStatus.UNCHANGED),
        }

        result = work.commit("Rework docs")

        assert result.files == {"README.md", "docs/index.md"}
        assert not (work.root / "docs").exists()
        changes = work.whatchanged(max_count=1)[0].path_changes
        assert [(c.path, c.change_kind) for c in changes] == [
            ("README.md", ChangeKind.MODIFIED),
            ("docs/index.md", ChangeKind.DELETED),
        ]

    def test_rename_is_detected(self, work: SimpleRepository) -> None:
        (work.root / "src/demo/util.py").rename(work.root / "src/demo/helpers.py")
        _ = work.add("src/demo", recursive=True)

        _ = work.commit("Rename util")

        changes = work.whatchanged(max_count=1)[0].path_changes
        assert [(c.path, c.change_kind, c.old_path) for c in changes] == [
            ("src/demo/helpers.py", ChangeKind.RENAMED, "src/demo/util.py")
        ]

    def test_history_of_a_path(self, work: SimpleRepository) -> None:
        first = work.head()
        write_file(work.root, "src/demo/core.py", "def answer():\n    return 43\n")
        _ = work.add("src/demo/core.py")
        second = work.commit("Fix answer").sha
        write_file(work.root, "README.md", "# Other\n")
        _ = work.add("README.md")
        _ = work.commit("Touch readme")

        assert work.rev_list(path="src/demo") == (second, first)
        assert work.rev_list(path="src/demo/util.py") == (first,)


class TestRemotes:
    def test_fetch_sees_pushed_commit(self, clone_origin: CloneFactory) -> None:
        alice = clone_origin("alice")
        bob = clone_origin("bob")
        write_file(alice.root, "alice.txt", "a")
        _ = alice.add("alice.txt")
        sha = alice.commit("From alice").sha
        assert alice.push()

        refs = bob.fetch()

        assert refs["refs/remotes/origin/master"] == sha
        assert bob.head() != sha
        assert "refs/remotes/origin/feature" in refs

    def test_diverged_push_is_rejected(
        self, clone_origin: CloneFactory, origin: Path
    ) -> None:
        alice = clone_origin("alice")
        bob = clone_origin("bob")
        for repo, name in ((alice, "alice.txt"), (bob, "bob.txt")):
            write_file(repo.root, name, name)
            _ = repo.add(name)
            _ = repo.commit(f"Add {name}")
        assert alice.push()

        assert bob.push() is False
        assert _remote_head(origin) == alice.head()

    def test_push_named_branch(self, work: SimpleRepository, origin: Path) -> None:
        _ = work.checkout(branch="topic", commit="HEAD")
        write_file(work.root, "topic.txt", "t")
        _ = work.add("topic.txt")
        sha = work.commit("Topic work").sha

        assert work.push(branch_name="topic")
        assert _remote_head(origin, "topic") == sha

    def test_progress_lines_are_reported(self, clone_origin: CloneFactory) -> None:
        lines: list[str] = []

        repo = clone_origin(progress=lines.append)

        assert repo.head() is not None
        assert all(line == line.strip() and line for line in lines)

    def test_clone_specific_branch(self, clone_origin: CloneFactory) -> None:
        repo = clone_origin(branch="feature")

        assert repo.current_branch() == "feature"
        assert (repo.root / "docs" / "feature.md").exists()

    def test_clone_missing_remote(self, tmp_path: Path) -> None:
        with pytest.raises(TransportError) as exc_info:
            _ = SimpleRepository.clone(tmp_path / "dest", str(tmp_path / "missing.git"))

        assert exc_info.value.operation == "clone"

    def test_fetch_unknown_remote(self, work: SimpleRepository) -> None:
        with pytest.raises(TransportError):
            _ = work.fetch(remote_name="nowhere")
