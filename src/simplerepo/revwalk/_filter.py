"""Revision walk filter."""

from dataclasses import dataclass
from datetime import datetime

from simplerepo.utils import ensure_aware


@dataclass(frozen=True, slots=True)
class RevisionFilter:
    """What a revision walk should emit.

    Attributes:
        start_points: Refs or commit ids to walk from; empty means HEAD.
        stop_points: Refs or commit ids whose ancestry is excluded,
            themselves included (``git rev-list start ^stop``).
        path: Only emit commits that change the file or directory at this
            repository-relative path.
        since: Only emit commits with a committer date at or after this.
        until: Only emit commits with a committer date at or before this.
        max_count: Stop after this many commits; -1 means unbounded.
        topo_order: Never emit a commit before all of its descendants.

    Naive datetimes are taken as UTC.

    Raises:
        ValueError: If ``max_count`` is below -1 or ``since`` is after ``until``.
    """

    start_points: tuple[str, ...] = ()
    stop_points: tuple[str, ...] = ()
    path: str | None = None
    since: datetime | None = None
    until: datetime | None = None
    max_count: int = -1
    topo_order: bool = False

    def __post_init__(self) -> None:
        if self.max_count < -1:
            msg = f"max_count must be -1 or greater, got {self.max_count}"
            raise ValueError(msg)
        if self.since is not None:
            object.__setattr__(self, "since", ensure_aware(self.since))
        if self.until is not None:
            object.__setattr__(self, "until", ensure_aware(self.until))
        if self.since is not None and self.until is not None and self.since > self.until:
            msg = f"since ({self.since}) is after until ({self.until})"
            raise ValueError(msg)
        if self.path is not None:
            object.__setattr__(self, "path", self.path.strip("/"))
        object.__setattr__(self, "start_points", tuple(self.start_points))
        object.__setattr__(self, "stop_points", tuple(self.stop_points))

    def in_window(self, when: datetime) -> bool:
        """Return True if a committer date falls inside ``[since, until]``."""
        if self.since is not None and when < self.since:
            return False
        return self.until is None or when <= self.until
