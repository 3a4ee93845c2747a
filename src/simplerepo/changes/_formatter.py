"""Projection of commits into change records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simplerepo.changes._models import ChangeRecord, PathChange
from simplerepo.enums import ChangeKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from simplerepo.changes._renames import RenameDetector
    from simplerepo.store import CommitNode, Identity, ObjectStore, TreeItem

DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def _under(path: str, prefix: str | None) -> bool:
    return not prefix or path == prefix or path.startswith(f"{prefix}/")


class ChangeFormatter:
    """Turns a commit into a ChangeRecord.

    The commit's tree is compared with its first parent's tree, or with an
    empty tree for a root commit. Merge commits are therefore described
    relative to the mainline. Without a rename detector a rename shows up
    as a deletion plus an addition.

    Args:
        store: Object store holding the commits and trees.
        rename_detector: Optional rename detection collaborator.
    """

    def __init__(
        self,
        store: ObjectStore,
        *,
        rename_detector: RenameDetector | None = None,
    ) -> None:
        self._store: ObjectStore = store
        self._rename_detector: RenameDetector | None = rename_detector

    def format(self, commit: CommitNode | str, path: str | None = None) -> ChangeRecord:
        """Describe a commit and the paths it changed.

        Args:
            commit: The commit, or its id.
            path: Only report changes at or below this path.

        Returns:
            The change record, with path changes ordered by path.
        """
        if isinstance(commit, str):
            commit = self._store.get_commit(commit)
        prefix = path.strip("/") if path else None

        parent_tree = (
            self._store.get_commit(commit.parents[0]).tree if commit.parents else None
        )
        old = self._store.get_tree_entries(parent_tree)
        new = self._store.get_tree_entries(commit.tree)
        changes = _diff(old, new, self._rename_detector)

        return ChangeRecord(
            commit_hash=commit.id,
            author=commit.author,
            committer=commit.committer,
            subject=commit.subject,
            body=commit.body,
            path_changes=tuple(
                change
                for change in changes
                if _under(change.path, prefix)
                or (change.old_path is not None and _under(change.old_path, prefix))
            ),
        )


def _diff(
    old: Mapping[str, TreeItem],
    new: Mapping[str, TreeItem],
    rename_detector: RenameDetector | None,
) -> list[PathChange]:
    deleted = {p: old[p].blob_hash for p in old.keys() - new.keys()}
    added = {p: new[p].blob_hash for p in new.keys() - old.keys()}
    changes = [
        PathChange(p, ChangeKind.MODIFIED)
        for p in old.keys() & new.keys()
        if (old[p].blob_hash, old[p].mode) != (new[p].blob_hash, new[p].mode)
    ]

    if rename_detector is not None and deleted and added:
        for old_path, new_path in rename_detector.detect(deleted, added):
            del deleted[old_path]
            del added[new_path]
            changes.append(PathChange(new_path, ChangeKind.RENAMED, old_path=old_path))

    changes.extend(PathChange(p, ChangeKind.DELETED) for p in deleted)
    changes.extend(PathChange(p, ChangeKind.ADDED) for p in added)
    changes.sort(key=lambda change: change.path)
    return changes


def _identity_lines(label: str, identity: Identity) -> list[str]:
    return [
        f"{label}: {identity}",
        f"{label}Date: {identity.when.strftime(DATE_FORMAT)}",
    ]


def render(record: ChangeRecord) -> str:
    """Render a change record in ``git whatchanged`` style.

    Example:
        >>> print(render(record))
        commit 3f2a...
        Author: Ada <ada@example.com>
        AuthorDate: 2024-01-02 10:00:00 +0000
        Commit: Ada <ada@example.com>
        CommitDate: 2024-01-02 10:00:00 +0000
        <BLANKLINE>
            Add parser
        <BLANKLINE>
        A	src/parser.py
    """
    lines = [f"commit {record.commit_hash}"]
    lines.extend(_identity_lines("Author", record.author))
    lines.extend(_identity_lines("Commit", record.committer))
    lines.append("")
    lines.append(f"    {record.subject}")
    if record.body:
        lines.append("")
        lines.extend(f"    {line}".rstrip() for line in record.body.splitlines())
    if record.path_changes:
        lines.append("")
        for change in record.path_changes:
            if change.change_kind is ChangeKind.RENAMED:
                lines.append(f"R\t{change.old_path}\t{change.path}")
            else:
                lines.append(f"{change.change_kind.letter}\t{change.path}")
    return "\n".join(lines) + "\n"
