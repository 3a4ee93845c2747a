"""Index value types."""

from dataclasses import dataclass

from simplerepo.enums import StageFlag


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One staged path.

    Attributes:
        path: Repository-relative POSIX path, unique within the index.
        blob_hash: Hex id of the staged content.
        stage_flag: State relative to HEAD.
        mode: Git file mode (0 for removed-pending entries).
        size: File size recorded at staging time.
        mtime_ns: File modification time recorded at staging time.
    """

    path: str
    blob_hash: str
    stage_flag: StageFlag
    mode: int = 0
    size: int = 0
    mtime_ns: int = 0

    @property
    def is_removed(self) -> bool:
        return self.stage_flag is StageFlag.REMOVED_PENDING
