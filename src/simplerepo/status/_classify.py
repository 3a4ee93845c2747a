"""Three-way classification of a single path."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simplerepo.enums import IndexStatus, RepoStatus, StageFlag

if TYPE_CHECKING:
    from simplerepo.index import IndexEntry

type Classification = tuple[IndexStatus, RepoStatus]

UNCHANGED: Classification = (IndexStatus.UNCHANGED, RepoStatus.UNCHANGED)


def classify(
    head_hash: str | None,
    index_entry: IndexEntry | None,
    work_hash: str | None,
) -> Classification:
    """Classify a path from its HEAD, index and working tree states.

    Each argument is None when the path is absent from that source. The
    index side is compared against HEAD and the working tree against the
    staged content (the index entry, or HEAD when the index has no entry
    for a HEAD path). A REMOVED_PENDING entry means the removal is staged.

    Args:
        head_hash: Blob hash in the HEAD tree.
        index_entry: The index entry for the path.
        work_hash: Content hash in the working tree. For a path with
            neither a HEAD nor an index entry only its presence matters.

    Returns:
        Tuple of (index_status, repo_status). ``UNCHANGED`` means the path
        is identical everywhere and is not reported.
    """
    if index_entry is not None and index_entry.stage_flag is StageFlag.REMOVED_PENDING:
        if work_hash is None:
            return IndexStatus.REMOVED, RepoStatus.UNCHANGED
        return IndexStatus.REMOVED, RepoStatus.UNTRACKED

    if head_hash is None:
        if index_entry is None:
            if work_hash is None:
                return UNCHANGED
            return IndexStatus.UNTRACKED, RepoStatus.UNTRACKED

        # Staged but never committed
        if work_hash is None:
            return IndexStatus.ADDED, RepoStatus.REMOVED
        if work_hash == index_entry.blob_hash:
            return IndexStatus.ADDED, RepoStatus.UNTRACKED
        return IndexStatus.ADDED, RepoStatus.MODIFIED

    if index_entry is None:
        index_status = IndexStatus.UNCHANGED
        staged_hash = head_hash
    else:
        staged_hash = index_entry.blob_hash
        index_status = (
            IndexStatus.UNCHANGED if staged_hash == head_hash else IndexStatus.MODIFIED
        )

    if work_hash is None:
        repo_status = RepoStatus.REMOVED
    elif work_hash == staged_hash:
        repo_status = RepoStatus.UNCHANGED
    else:
        repo_status = RepoStatus.MODIFIED
    return index_status, repo_status
