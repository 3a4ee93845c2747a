"""Repository facade result models."""

from dataclasses import dataclass, field

from simplerepo.enums import StageFlag


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Result of a commit operation.

    Attributes:
        sha: Commit id, None if no_changes.
        files: Repository-relative paths that differ from the parent commit.
        no_changes: True if nothing was committed.
    """

    sha: str | None
    files: frozenset[str]
    no_changes: bool


@dataclass(frozen=True, slots=True)
class LsFileEntry:
    """One line of ``ls_files`` output.

    Untracked files (only listed on request) have no blob hash and no
    stage flag.

    Attributes:
        path: Repository-relative POSIX path.
        blob_hash: Staged object id, or None for an untracked file.
        mode: Git file mode.
        size: Size in bytes recorded in the index (or on disk if untracked).
        stage_flag: Index stage flag, or None for an untracked file.
    """

    path: str
    blob_hash: str | None
    mode: int
    size: int
    stage_flag: StageFlag | None

    @property
    def is_tracked(self) -> bool:
        return self.stage_flag is not None


@dataclass(frozen=True, slots=True)
class Credentials:
    """Username and password for HTTP(S) remotes."""

    username: str
    password: str = field(repr=False)
