from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
from builders import BASE_TIME, GraphBuilder

from simplerepo.exceptions import RefNotFoundError
from simplerepo.revwalk import RevisionFilter, RevisionWalker
from simplerepo.utils import from_git_time

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _walk(graph: GraphBuilder, **kwargs: object) -> tuple[str, ...]:
    revision_filter = RevisionFilter(**kwargs)  # pyright: ignore[reportArgumentType]
    return RevisionWalker(graph.store).walk(revision_filter)


class TestOrdering:
    def test_linear_history_newest_first(self, graph: GraphBuilder) -> None:
        ids = graph.chain(4)

        assert _walk(graph) == tuple(reversed(ids))

    def test_explicit_start_point(self, graph: GraphBuilder) -> None:
        ids = graph.chain(4)

        assert _walk(graph, start_points=(ids[1],)) == (ids[1], ids[0])

    def test_merge_interleaves_by_committer_date(self, graph: GraphBuilder) -> None:
        root = graph.commit({"f": b"0"}, at=0, ref=None)
        side = graph.commit({"f": b"side"}, parents=[root], at=20, ref=None)
        main = graph.commit({"f": b"main"}, parents=[root], at=10, ref=None)
        merge = graph.commit({"f": b"m"}, parents=[main, side], at=30)

        assert _walk(graph) == (merge, side, main, root)

    def test_each_commit_emitted_once(self, graph: GraphBuilder) -> None:
        root = graph.commit({"f": b"0"}, at=0, ref=None)
        left = graph.commit({"f": b"l"}, parents=[root], at=10, ref=None)
        right = graph.commit({"f": b"r"}, parents=[root], at=10, ref=None)
        merge = graph.commit({"f": b"m"}, parents=[left, right], at=20)

        result = _walk(graph)

        assert len(result) == len(set(result)) == 4
        assert result[0] == merge
        assert result[-1] == root

    def test_date_ties_go_to_first_parent(self, graph: GraphBuilder) -> None:
        root = graph.commit({"f": b"0"}, at=0, ref=None)
        first = graph.commit({"f": b"a"}, parents=[root], at=10, ref=None)
        second = graph.commit({"f": b"b"}, parents=[root], at=10, ref=None)
        merge = graph.commit({"f": b"m"}, parents=[first, second], at=20)

        assert _walk(graph) == (merge, first, second, root)

    def test_topo_order_keeps_children_first(self, graph: GraphBuilder) -> None:
        # A skewed clock dates the parent after its child
        root = graph.commit({"f": b"0"}, at=0, ref=None)
        parent = graph.commit({"f": b"p"}, parents=[root], at=100, ref=None)
        child = graph.commit({"f": b"c"}, parents=[parent], at=50, ref=None)
        merge = graph.commit({"f": b"m"}, parents=[child, parent], at=200)

        by_date = _walk(graph)
        result = _walk(graph, topo_order=True)

        assert by_date.index(parent) < by_date.index(child)
        assert result == (merge, child, parent, root)


class TestStopPoints:
    def test_stop_excludes_its_ancestry(self, graph: GraphBuilder) -> None:
        ids = graph.chain(5)

        assert _walk(graph, stop_points=(ids[2],)) == (ids[4], ids[3])

    def test_stop_on_side_branch(self, graph: GraphBuilder) -> None:
        root = graph.commit({"f": b"0"}, at=0, ref=None)
        side = graph.commit({"f": b"s"}, parents=[root], at=10, ref=None)
        main = graph.commit({"f": b"m"}, parents=[root], at=20)

        assert _walk(graph, stop_points=(side,)) == (main,)

    def test_start_inside_stop_ancestry_is_empty(self, graph: GraphBuilder) -> None:
        ids = graph.chain(3)

        assert _walk(graph, start_points=(ids[0],), stop_points=(ids[2],)) == ()

    def test_unknown_stop_point(self, graph: GraphBuilder) -> None:
        graph.chain(2)

        with pytest.raises(RefNotFoundError):
            _ = _walk(graph, stop_points=("nope",))

    def test_unknown_start_point(self, graph: GraphBuilder) -> None:
        graph.chain(2)

        with pytest.raises(RefNotFoundError):
            _ = _walk(graph, start_points=("nope",))


class TestFilters:
    def test_unborn_head_walks_nothing(self, graph: GraphBuilder) -> None:
        assert _walk(graph) == ()

    def test_max_count(self, graph: GraphBuilder) -> None:
        ids = graph.chain(5)

        assert _walk(graph, max_count=2) == (ids[4], ids[3])
        assert _walk(graph, max_count=0) == ()
        assert len(_walk(graph, max_count=-1)) == 5

    def test_date_window(self, graph: GraphBuilder) -> None:
        ids = graph.chain(5, step=60)

        result = _walk(
            graph,
            since=from_git_time(BASE_TIME + 60, 0),
            until=from_git_time(BASE_TIME + 180, 0),
        )

        assert result == (ids[3], ids[2], ids[1])

    def test_window_does_not_cut_traversal(self, graph: GraphBuilder) -> None:
        old = graph.commit({"f": b"0"}, at=0, ref=None)
        skewed = graph.commit({"f": b"1"}, parents=[old], at=-1000, ref=None)
        tip = graph.commit({"f": b"2"}, parents=[skewed], at=10)

        result = _walk(graph, since=from_git_time(BASE_TIME - 1, 0))

        assert result == (tip, old)

    def test_window_uses_instants_not_wall_clock(self, graph: GraphBuilder) -> None:
        # The offset moves the wall clock, not the instant
        early = graph.commit({"f": b"0"}, at=0, offset=0, ref=None)
        late = graph.commit({"f": b"1"}, parents=[early], at=3600, offset=-5 * 3600)

        since = from_git_time(BASE_TIME + 1, 0) + timedelta(minutes=1)

        assert _walk(graph, since=since) == (late,)

    def test_path_filter(self, graph: GraphBuilder) -> None:
        first = graph.commit({"a.txt": b"1", "b.txt": b"1"}, at=0)
        second = graph.commit({"a.txt": b"2", "b.txt": b"1"}, parents=[first], at=10)
        third = graph.commit({"a.txt": b"2", "b.txt": b"2"}, parents=[second], at=20)

        assert _walk(graph, path="a.txt") == (second, first)
        assert _walk(graph, path="b.txt") == (third, first)

    def test_path_filter_on_directory(self, graph: GraphBuilder) -> None:
        first = graph.commit({"src/a.py": b"1", "README": b"r"}, at=0)
        second = graph.commit({"src/a.py": b"1", "README": b"s"}, parents=[first], at=10)
        third = graph.commit(
            {"src/a.py": b"1", "src/b.py": b"b", "README": b"s"}, parents=[second], at=20
        )

        assert _walk(graph, path="src") == (third, first)

    def test_path_filter_sees_deletion(self, graph: GraphBuilder) -> None:
        first = graph.commit({"gone.txt": b"1", "keep": b"k"}, at=0)
        second = graph.commit({"keep": b"k"}, parents=[first], at=10)

        assert _walk(graph, path="gone.txt") == (second, first)

    def test_merge_matching_one_parent_is_not_emitted(self, graph: GraphBuilder) -> None:
        root = graph.commit({"f": b"0", "g": b"0"}, at=0, ref=None)
        side = graph.commit({"f": b"1", "g": b"0"}, parents=[root], at=10, ref=None)
        main = graph.commit({"f": b"0", "g": b"1"}, parents=[root], at=20, ref=None)
        _merge = graph.commit({"f": b"1", "g": b"1"}, parents=[main, side], at=30)

        assert _walk(graph, path="f") == (side, root)

    def test_filters_combine_with_count(self, graph: GraphBuilder) -> None:
        ids = graph.chain(6, step=60)

        result = _walk(graph, since=from_git_time(BASE_TIME + 60, 0), max_count=2)

        assert result == (ids[5], ids[4])


class TestLogging:
    def test_walk_logs_summary(self, graph: GraphBuilder, mocker: MockerFixture) -> None:
        graph.chain(3)
        logger = mocker.MagicMock()

        _ = RevisionWalker(graph.store, logger=logger).walk(RevisionFilter(path="file.txt"))

        logger.info.assert_called_once_with(
            "walk_completed",
            start_points=["HEAD"],
            stop_points=[],
            path="file.txt",
            emitted=3,
        )

    def test_iter_walk_is_lazy_after_resolution(
        self, graph: GraphBuilder, mocker: MockerFixture
    ) -> None:
        graph.chain(50)
        spy = mocker.spy(graph.store, "get_commit")

        iterator = RevisionWalker(graph.store).iter_walk(RevisionFilter())
        _ = next(iter(iterator))

        assert spy.call_count < 50
