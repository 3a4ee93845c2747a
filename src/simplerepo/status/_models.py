"""Status value types."""

from dataclasses import dataclass

from simplerepo.enums import IndexStatus, RepoStatus


@dataclass(frozen=True, slots=True)
class StatusRecord:
    """Classification of one path across HEAD, index and working tree.

    Attributes:
        path: Repository-relative POSIX path.
        index_status: Index compared to HEAD.
        repo_status: Working tree compared to the staged state.
    """

    path: str
    index_status: IndexStatus
    repo_status: RepoStatus

    @property
    def is_untracked(self) -> bool:
        return self.index_status is IndexStatus.UNTRACKED

    @property
    def is_staged(self) -> bool:
        return self.index_status in {
            IndexStatus.ADDED,
            IndexStatus.MODIFIED,
            IndexStatus.REMOVED,
        }
