"""Rename detection."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping


class RenameDetector(Protocol):
    """Pairs deleted paths with added paths that are renames of them."""

    def detect(
        self, deleted: Mapping[str, str], added: Mapping[str, str]
    ) -> list[tuple[str, str]]:
        """Return ``(old_path, new_path)`` pairs.

        Args:
            deleted: Deleted paths mapped to their old blob hash.
            added: Added paths mapped to their new blob hash.
        """
        ...


class ExactRenameDetector:
    """Detects renames whose content did not change at all.

    Each deleted path is used at most once. When several deleted paths hold
    the same content, one with the same file name as the added path is
    preferred, then the lexicographically first.
    """

    def detect(
        self, deleted: Mapping[str, str], added: Mapping[str, str]
    ) -> list[tuple[str, str]]:
        by_hash: dict[str, list[str]] = {}
        for path in sorted(deleted):
            by_hash.setdefault(deleted[path], []).append(path)

        pairs: list[tuple[str, str]] = []
        for new_path in sorted(added):
            candidates = by_hash.get(added[new_path])
            if not candidates:
                continue
            basename = posixpath.basename(new_path)
            old_path = next(
                (c for c in candidates if posixpath.basename(c) == basename),
                candidates[0],
            )
            candidates.remove(old_path)
            pairs.append((old_path, new_path))
        return pairs
