from datetime import UTC, datetime, timedelta, timezone

import pytest

from simplerepo.revwalk import RevisionFilter


class TestRevisionFilter:
    def test_defaults(self) -> None:
        revision_filter = RevisionFilter()

        assert revision_filter.start_points == ()
        assert revision_filter.max_count == -1
        assert not revision_filter.topo_order

    def test_naive_dates_become_utc(self) -> None:
        revision_filter = RevisionFilter(since=datetime(2024, 1, 1))

        assert revision_filter.since == datetime(2024, 1, 1, tzinfo=UTC)

    def test_path_slashes_are_stripped(self) -> None:
        assert RevisionFilter(path="/src/app/").path == "src/app"

    def test_lists_become_tuples(self) -> None:
        revision_filter = RevisionFilter(
            start_points=["main"],  # pyright: ignore[reportArgumentType]
            stop_points=["v1"],  # pyright: ignore[reportArgumentType]
        )

        assert revision_filter.start_points == ("main",)
        assert revision_filter.stop_points == ("v1",)

    def test_rejects_negative_count(self) -> None:
        with pytest.raises(ValueError, match="max_count"):
            _ = RevisionFilter(max_count=-2)

    def test_rejects_inverted_window(self) -> None:
        with pytest.raises(ValueError, match="after until"):
            _ = RevisionFilter(
                since=datetime(2024, 2, 1, tzinfo=UTC),
                until=datetime(2024, 1, 1, tzinfo=UTC),
            )

    def test_window_is_inclusive(self) -> None:
        since = datetime(2024, 1, 1, tzinfo=UTC)
        until = datetime(2024, 1, 31, tzinfo=UTC)
        revision_filter = RevisionFilter(since=since, until=until)

        assert revision_filter.in_window(since)
        assert revision_filter.in_window(until)
        assert not revision_filter.in_window(since - timedelta(seconds=1))
        assert not revision_filter.in_window(until + timedelta(seconds=1))

    def test_window_compares_instants_across_offsets(self) -> None:
        revision_filter = RevisionFilter(since=datetime(2024, 1, 1, 12, tzinfo=UTC))
        same_instant = datetime(2024, 1, 1, 14, tzinfo=timezone(timedelta(hours=2)))

        assert revision_filter.in_window(same_instant)

    def test_open_window_accepts_everything(self) -> None:
        assert RevisionFilter().in_window(datetime(1970, 1, 1, tzinfo=UTC))
