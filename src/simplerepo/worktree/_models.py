"""Working tree value types."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WorkingTreeEntry:
    """A file found in the working tree during one scan.

    Attributes:
        path: Repository-relative POSIX path.
        mtime_ns: Modification time in nanoseconds.
        size: Size in bytes (0 for submodules).
        mode: Git file mode (regular, executable, symlink or gitlink).
        is_submodule: True when the path is a nested repository kept opaque.
    """

    path: str
    mtime_ns: int
    size: int
    mode: int
    is_submodule: bool = False
