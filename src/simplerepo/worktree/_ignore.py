"""Gitignore-style ignore rules using pathspec.

Rules come from ``.git/info/exclude``, the root ``.gitignore`` and any
nested ``.gitignore`` files. A nested file's patterns are relative to its
own directory and take precedence over files closer to the root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - Used at runtime in function parameters
from typing import TYPE_CHECKING

from pathspec import GitIgnoreSpec

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class IgnoreConfig:
    """Configuration for ignore pattern loading.

    Attributes:
        exclude_file: Whether to load ``.git/info/exclude``.
        nested_gitignore: Whether ``.gitignore`` files below the root apply.
        extra_patterns: Additional patterns applied at the root.
    """

    exclude_file: bool = True
    nested_gitignore: bool = True
    extra_patterns: tuple[str, ...] = field(default_factory=tuple)


def load_gitignore_patterns(path: Path) -> list[str]:
    """Load patterns from a gitignore file.

    Comments and blank lines are dropped. Trailing whitespace is kept only
    when escaped, as git does.

    Args:
        path: Path to the gitignore file.

    Returns:
        List of patterns from the file; empty if the file doesn't exist.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
        return []

    patterns: list[str] = []
    for line in content.splitlines():
        stripped = line if line.endswith("\\ ") else line.rstrip()
        if not stripped or stripped.startswith("#"):
            continue
        patterns.append(stripped)
    return patterns


class IgnoreRules:
    """Decides whether working-tree paths are ignored.

    Per-directory specs are loaded lazily and cached for the lifetime of the
    object; create a new instance to pick up edited ignore files.

    Args:
        root: Working tree root.
        git_dir: The repository's git directory, for ``info/exclude``.
        config: Pattern source configuration.
    """

    def __init__(
        self,
        root: Path,
        *,
        git_dir: Path | None = None,
        config: IgnoreConfig | None = None,
    ) -> None:
        self._root: Path = root
        self._config: IgnoreConfig = config or IgnoreConfig()
        self._specs: dict[str, GitIgnoreSpec | None] = {}

        root_patterns: list[str] = []
        if self._config.exclude_file and git_dir is not None:
            root_patterns.extend(load_gitignore_patterns(git_dir / "info" / "exclude"))
        root_patterns.extend(load_gitignore_patterns(root / ".gitignore"))
        root_patterns.extend(self._config.extra_patterns)
        self._specs[""] = _build_spec(root_patterns)

    def is_ignored(self, path: str) -> bool:
        """Return True if a repository-relative path is ignored.

        The deepest ``.gitignore`` with a matching pattern decides; within a
        file the last matching pattern wins, so ``!`` re-includes work.
        """
        parts = path.strip("/").split("/")
        directories = ["/".join(parts[:i]) for i in range(len(parts))]

        for directory in reversed(directories):
            spec = self._spec_for(directory)
            if spec is None:
                continue
            relative = path[len(directory) + 1 :] if directory else path
            result = spec.check_file(relative)
            if result.include is not None:
                return bool(result.include)
        return False

    def filter(self, paths: Iterable[str]) -> list[str]:
        """Return the paths that are not ignored, in input order."""
        return [path for path in paths if not self.is_ignored(path)]

    def _spec_for(self, directory: str) -> GitIgnoreSpec | None:
        if directory in self._specs:
            return self._specs[directory]
        spec = None
        if self._config.nested_gitignore:
            spec = _build_spec(
                load_gitignore_patterns(self._root / directory / ".gitignore")
            )
        self._specs[directory] = spec
        return spec


def _build_spec(patterns: list[str]) -> GitIgnoreSpec | None:
    if not patterns:
        return None
    return GitIgnoreSpec.from_lines(patterns)
