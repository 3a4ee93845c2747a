"""simplerepo exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class SimpleRepoError(Exception):
    """Base exception for simplerepo errors."""


# =============================================================================
# Repository Exceptions
# =============================================================================


class NotARepositoryError(SimpleRepoError):
    """Raised when a location does not hold a usable git repository.

    Attributes:
        path: The location that was inspected.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The location that was inspected.
        """
        super().__init__(message)
        self.path: Path | None = path


class RefNotFoundError(SimpleRepoError, KeyError):
    """Raised when a ref name or commit id cannot be resolved.

    Attributes:
        ref: The name that failed to resolve.
    """

    def __init__(self, message: str, *, ref: str | None = None) -> None:
        """Initialize with error message and ref context.

        Args:
            message: Human-readable error message.
            ref: The name that failed to resolve.
        """
        super().__init__(message)
        self.ref: str | None = ref

    def __str__(self) -> str:
        # KeyError quotes its message; keep the plain text
        return str(self.args[0]) if self.args else ""


class RepositoryConflictError(SimpleRepoError):
    """Raised when a ref moved underneath a compare-and-swap update.

    Attributes:
        ref: The ref that was being updated.
        expected: The id the ref was expected to hold.
        actual: The id the ref actually held.
    """

    def __init__(
        self,
        message: str,
        *,
        ref: str | None = None,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        """Initialize with error message and conflict context.

        Args:
            message: Human-readable error message.
            ref: The ref that was being updated.
            expected: The id the ref was expected to hold.
            actual: The id the ref actually held.
        """
        super().__init__(message)
        self.ref: str | None = ref
        self.expected: str | None = expected
        self.actual: str | None = actual


class PathOutsideRepositoryError(SimpleRepoError, ValueError):
    """Raised when attempting to operate on files outside the working tree.

    Attributes:
        path: The path that violated the constraint.
        root: The working tree root.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        root: Path | None = None,
    ) -> None:
        """Initialize with error message and path violation context.

        Args:
            message: Human-readable error message.
            path: The path that violated the constraint.
            root: The working tree root.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.root: Path | None = root


# =============================================================================
# Index Exceptions
# =============================================================================


class IndexStoreError(SimpleRepoError):
    """Base exception for index errors."""


class IndexCorruptError(IndexStoreError):
    """Raised when the on-disk index cannot be parsed.

    Attributes:
        path: Path to the index file.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: Path to the index file.
        """
        super().__init__(message)
        self.path: Path | None = path


class LockHeldError(IndexStoreError):
    """Raised when another writer holds the index lock.

    Attributes:
        lock_path: Path to the lock file that already exists.
    """

    def __init__(self, message: str, *, lock_path: Path | None = None) -> None:
        """Initialize with error message and lock context.

        Args:
            message: Human-readable error message.
            lock_path: Path to the lock file that already exists.
        """
        super().__init__(message)
        self.lock_path: Path | None = lock_path


class RepositoryIOError(SimpleRepoError, OSError):
    """Raised when a filesystem operation fails during a scan or write.

    Attributes:
        path: Path to the file that caused the error.
        operation: The operation that failed ("read", "write", "scan").
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        operation: str = "",
    ) -> None:
        """Initialize with error message and I/O context.

        Args:
            message: Human-readable error message.
            path: Path to the file that caused the error.
            operation: The operation that failed.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.operation: str = operation

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


# =============================================================================
# Transport Exceptions
# =============================================================================


class TransportError(SimpleRepoError):
    """Raised when a clone, fetch, or push fails in the transport layer.

    Attributes:
        remote: The remote name or URL involved.
        operation: The network operation that failed.
    """

    def __init__(
        self,
        message: str,
        *,
        remote: str | None = None,
        operation: str = "",
    ) -> None:
        """Initialize with error message and transport context.

        Args:
            message: Human-readable error message.
            remote: The remote name or URL involved.
            operation: The network operation that failed.
        """
        super().__init__(message)
        self.remote: str | None = remote
        self.operation: str = operation


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(SimpleRepoError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        errors: tuple[str, ...] = (),
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.source: str | None = source
        self.errors: tuple[str, ...] = errors
