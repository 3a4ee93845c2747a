from simplerepo.changes import ExactRenameDetector

H1 = "1" * 40
H2 = "2" * 40


class TestExactRenameDetector:
    def test_pairs_identical_content(self) -> None:
        pairs = ExactRenameDetector().detect({"old.txt": H1}, {"new.txt": H1})

        assert pairs == [("old.txt", "new.txt")]

    def test_different_content_is_not_a_rename(self) -> None:
        assert ExactRenameDetector().detect({"old.txt": H1}, {"new.txt": H2}) == []

    def test_each_deletion_used_once(self) -> None:
        pairs = ExactRenameDetector().detect(
            {"a.txt": H1}, {"b.txt": H1, "c.txt": H1}
        )

        assert pairs == [("a.txt", "b.txt")]

    def test_prefers_same_basename(self) -> None:
        pairs = ExactRenameDetector().detect(
            {"a/config.toml": H1, "b/other.toml": H1}, {"c/config.toml": H1}
        )

        assert pairs == [("a/config.toml", "c/config.toml")]

    def test_falls_back_to_first_path(self) -> None:
        pairs = ExactRenameDetector().detect(
            {"z.txt": H1, "y.txt": H1}, {"moved.txt": H1}
        )

        assert pairs == [("y.txt", "moved.txt")]
