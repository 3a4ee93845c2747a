"""Property-based tests for three-way classification."""

from hypothesis import given, settings, strategies as st

from simplerepo.enums import IndexStatus, RepoStatus, StageFlag
from simplerepo.index import IndexEntry
from simplerepo.status import classify

# A tiny hash space makes equal hashes common
hashes = st.sampled_from(["a" * 40, "b" * 40, "c" * 40])
maybe_hash = st.none() | hashes


@st.composite
def index_entries(draw: st.DrawFn, head_hash: str | None) -> IndexEntry | None:
    if draw(st.booleans()):
        return None
    if head_hash is not None and draw(st.booleans()):
        return IndexEntry(
            path="f", blob_hash=head_hash, stage_flag=StageFlag.REMOVED_PENDING
        )
    flag = StageFlag.ADDED if head_hash is None else StageFlag.NORMAL
    return IndexEntry(path="f", blob_hash=draw(hashes), stage_flag=flag, mode=0o100644)


class TestClassifyProperties:
    @given(data=st.data(), head=maybe_hash, work=maybe_hash)
    @settings(max_examples=300)
    def test_unchanged_iff_all_sides_agree(
        self, data: st.DataObject, head: str | None, work: str | None
    ) -> None:
        entry = data.draw(index_entries(head))

        result = classify(head, entry, work)

        staged = None if entry is None or entry.is_removed else entry.blob_hash
        if entry is None:
            staged = head
        agree = staged == head and work == staged and not (entry and entry.is_removed)
        assert (result == (IndexStatus.UNCHANGED, RepoStatus.UNCHANGED)) == agree

    @given(data=st.data(), head=maybe_hash, work=maybe_hash)
    @settings(max_examples=300)
    def test_index_side_ignores_working_tree(
        self, data: st.DataObject, head: str | None, work: str | None
    ) -> None:
        entry = data.draw(index_entries(head))
        index_status, _ = classify(head, entry, work)

        if entry is not None and entry.is_removed:
            assert index_status is IndexStatus.REMOVED
        elif head is None and entry is None:
            assert index_status in {IndexStatus.UNCHANGED, IndexStatus.UNTRACKED}
        elif head is None:
            assert index_status is IndexStatus.ADDED
        elif entry is None or entry.blob_hash == head:
            assert index_status is IndexStatus.UNCHANGED
        else:
            assert index_status is IndexStatus.MODIFIED

    @given(data=st.data(), head=maybe_hash)
    @settings(max_examples=200)
    def test_missing_work_file_of_staged_path_is_removed(
        self, data: st.DataObject, head: str | None
    ) -> None:
        entry = data.draw(index_entries(head))
        if entry is None and head is None:
            return

        _, repo_status = classify(head, entry, None)

        expected = (
            RepoStatus.UNCHANGED
            if entry is not None and entry.is_removed
            else RepoStatus.REMOVED
        )
        assert repo_status is expected
