from builders import GraphBuilder

from simplerepo.changes import (
    ChangeFormatter,
    ChangeRecord,
    ExactRenameDetector,
    PathChange,
    render,
)
from simplerepo.enums import ChangeKind
from simplerepo.store import Identity
from simplerepo.utils import parse_date


def _changes(record: ChangeRecord) -> list[tuple[str, str, str | None]]:
    return [(c.change_kind.letter, c.path, c.old_path) for c in record.path_changes]


class TestChangeFormatter:
    def test_root_commit_adds_everything(self, graph: GraphBuilder) -> None:
        commit = graph.commit({"b.txt": b"b", "a/x.txt": b"x"}, message="Initial")

        record = ChangeFormatter(graph.store).format(commit)

        assert record.commit_hash == commit
        assert record.subject == "Initial"
        assert record.body == ""
        assert _changes(record) == [("A", "a/x.txt", None), ("A", "b.txt", None)]

    def test_add_modify_delete(self, graph: GraphBuilder) -> None:
        first = graph.commit({"keep": b"1", "edit": b"1", "drop": b"1"})
        second = graph.commit({"keep": b"1", "edit": b"2", "new": b"n"}, parents=[first])

        record = ChangeFormatter(graph.store).format(second)

        assert _changes(record) == [
            ("D", "drop", None),
            ("M", "edit", None),
            ("A", "new", None),
        ]

    def test_rename_without_detector(self, graph: GraphBuilder) -> None:
        first = graph.commit({"old.txt": b"same"})
        second = graph.commit({"new.txt": b"same"}, parents=[first])

        record = ChangeFormatter(graph.store).format(second)

        assert _changes(record) == [("A", "new.txt", None), ("D", "old.txt", None)]

    def test_rename_with_detector(self, graph: GraphBuilder) -> None:
        first = graph.commit({"old.txt": b"same"})
        second = graph.commit({"new.txt": b"same"}, parents=[first])

        formatter = ChangeFormatter(graph.store, rename_detector=ExactRenameDetector())
        record = formatter.format(second)

        assert record.path_changes == (
            PathChange("new.txt", ChangeKind.RENAMED, old_path="old.txt"),
        )

    def test_merge_is_described_against_first_parent(self, graph: GraphBuilder) -> None:
        root = graph.commit({"f": b"0"}, ref=None)
        side = graph.commit({"f": b"0", "side": b"s"}, parents=[root], ref=None)
        main = graph.commit({"f": b"1"}, parents=[root], ref=None)
        merge = graph.commit({"f": b"1", "side": b"s"}, parents=[main, side])

        record = ChangeFormatter(graph.store).format(merge)

        assert _changes(record) == [("A", "side", None)]

    def test_empty_commit_has_no_changes(self, graph: GraphBuilder) -> None:
        first = graph.commit({"f": b"0"})
        second = graph.commit({"f": b"0"}, parents=[first])

        assert ChangeFormatter(graph.store).format(second).path_changes == ()

    def test_path_restricts_changes(self, graph: GraphBuilder) -> None:
        commit = graph.commit({"src/a.py": b"a", "src/b.py": b"b", "README": b"r"})

        record = ChangeFormatter(graph.store).format(commit, path="src/")

        assert [c.path for c in record.path_changes] == ["src/a.py", "src/b.py"]

    def test_accepts_commit_node(self, graph: GraphBuilder) -> None:
        commit = graph.commit({"f": b"0"}, message="Subject\n\nLonger body")
        node = graph.store.get_commit(commit)

        record = ChangeFormatter(graph.store).format(node)

        assert record.subject == "Subject"
        assert record.body == "Longer body"
        assert record.author_name == "Ada Lovelace"
        assert record.committer_email == "ada@example.com"
        assert record.author_date == node.author.when


class TestRender:
    def test_whatchanged_layout(self) -> None:
        who = Identity("Ada", "ada@example.com", parse_date("2024-01-02 10:00:00 +0100"))
        record = ChangeRecord(
            commit_hash="a" * 40,
            author=who,
            committer=who,
            subject="Add parser",
            body="Handles nested tables.\nAnd arrays.",
            path_changes=(
                PathChange("src/new.py", ChangeKind.RENAMED, old_path="src/old.py"),
                PathChange("src/parser.py", ChangeKind.ADDED),
            ),
        )

        assert render(record) == (
            f"commit {'a' * 40}\n"
            "Author: Ada <ada@example.com>\n"
            "AuthorDate: 2024-01-02 10:00:00 +0100\n"
            "Commit: Ada <ada@example.com>\n"
            "CommitDate: 2024-01-02 10:00:00 +0100\n"
            "\n"
            "    Add parser\n"
            "\n"
            "    Handles nested tables.\n"
            "    And arrays.\n"
            "\n"
            "R\tsrc/old.py\tsrc/new.py\n"
            "A\tsrc/parser.py\n"
        )

    def test_no_body_no_changes(self) -> None:
        who = Identity("Ada", "ada@example.com", parse_date("2024-01-02T10:00:00Z"))
        record = ChangeRecord("b" * 40, who, who, "Empty", "", ())

        assert render(record).endswith("\n    Empty\n")
