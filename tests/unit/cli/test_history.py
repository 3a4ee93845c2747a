import pytest

from simplerepo.cli._commands._history import split_revisions


class TestSplitRevisions:
    @pytest.mark.parametrize(
        ("revisions", "starts", "stops"),
        [
            ((), [], []),
            (("main",), ["main"], []),
            (("main", "^v1.0"), ["main"], ["v1.0"]),
            (("v1.0..main",), ["main"], ["v1.0"]),
            (("v1.0..",), ["HEAD"], ["v1.0"]),
            (("..main",), ["main"], ["HEAD"]),
            (("a", "b", "^c", "^d"), ["a", "b"], ["c", "d"]),
        ],
    )
    def test_split(
        self, revisions: tuple[str, ...], starts: list[str], stops: list[str]
    ) -> None:
        assert split_revisions(revisions) == (starts, stops)

    def test_symmetric_difference_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="Symmetric difference"):
            _ = split_revisions(("main...topic",))
