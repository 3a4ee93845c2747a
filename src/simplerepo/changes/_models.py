"""Change record value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from simplerepo.enums import ChangeKind

if TYPE_CHECKING:
    from datetime import datetime

    from simplerepo.store import Identity


@dataclass(frozen=True, slots=True)
class PathChange:
    """How one path changed in a commit.

    Attributes:
        path: Path after the change (before it, for deletions).
        change_kind: Kind of change.
        old_path: Previous path of a rename.
    """

    path: str
    change_kind: ChangeKind
    old_path: str | None = None


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """A commit with the paths it changed relative to its first parent.

    Attributes:
        commit_hash: Full hex commit id.
        author: Author identity and date.
        committer: Committer identity and date.
        subject: First line of the message.
        body: Message text after the subject paragraph.
        path_changes: Changes ordered by path.
    """

    commit_hash: str
    author: Identity
    committer: Identity
    subject: str
    body: str
    path_changes: tuple[PathChange, ...]

    @property
    def author_name(self) -> str:
        return self.author.name

    @property
    def author_email(self) -> str:
        return self.author.email

    @property
    def author_date(self) -> datetime:
        return self.author.when

    @property
    def committer_name(self) -> str:
        return self.committer.name

    @property
    def committer_email(self) -> str:
        return self.committer.email

    @property
    def committer_date(self) -> datetime:
        return self.committer.when
