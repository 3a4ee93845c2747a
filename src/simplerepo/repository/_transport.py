"""Network operations over dulwich porcelain.

Every failure that originates in the transport layer is raised as
TransportError chained to the dulwich cause. A push the remote refuses
(non-fast-forward or a rejected ref) is not an error: it returns False.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, override

from dulwich import porcelain
from dulwich.errors import GitProtocolError, NotGitRepository

from simplerepo.exceptions import TransportError
from simplerepo.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from dulwich.repo import Repo
    from structlog.typing import FilteringBoundLogger

    from simplerepo.repository._models import Credentials

type ProgressCallback = Callable[[str], None]

_TRANSPORT_ERRORS = (porcelain.Error, GitProtocolError, NotGitRepository, OSError)


class ProgressStream(io.RawIOBase):
    """Byte stream that forwards dulwich progress output line by line.

    Args:
        callback: Receives each decoded line; None discards the output.
    """

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        super().__init__()
        self._callback: ProgressCallback | None = callback
        self._pending: str = ""

    @override
    def writable(self) -> bool:
        return True

    @override
    def write(self, b: object) -> int:
        data = bytes(b)  # pyright: ignore[reportArgumentType]
        if self._callback is not None:
            text = self._pending + data.decode("utf-8", errors="replace")
            # Servers redraw progress lines with "\r"
            *lines, self._pending = text.replace("\r", "\n").split("\n")
            for line in lines:
                if line.strip():
                    self._callback(line.strip())
        return len(data)

    @override
    def flush(self) -> None:
        if self._callback is not None and self._pending.strip():
            self._callback(self._pending.strip())
        self._pending = ""


def _auth_kwargs(credentials: Credentials | None) -> dict[str, str]:
    if credentials is None:
        return {}
    return {"username": credentials.username, "password": credentials.password}


def clone(
    uri: str,
    dest: Path,
    *,
    remote_name: str = "origin",
    branch: str | None = None,
    credentials: Credentials | None = None,
    progress: ProgressCallback | None = None,
    logger: FilteringBoundLogger | None = None,
) -> Repo:
    """Clone ``uri`` into ``dest`` and check out the default (or given) branch.

    Raises:
        TransportError: If the remote cannot be reached or read.
    """
    logger = logger or create_null_logger()
    stream = ProgressStream(progress)
    try:
        repo = porcelain.clone(
            uri,
            str(dest),
            errstream=stream,
            origin=remote_name,
            branch=branch,
            **_auth_kwargs(credentials),
        )
    except _TRANSPORT_ERRORS as e:
        msg = f"Failed to clone {uri}: {e}"
        raise TransportError(msg, remote=uri, operation="clone") from e
    finally:
        stream.flush()

    logger.info("clone_completed", uri=uri, dest=str(dest), branch=branch)
    return repo


def push(
    repo: Repo,
    remote_name: str,
    branch_name: str,
    *,
    credentials: Credentials | None = None,
    progress: ProgressCallback | None = None,
    logger: FilteringBoundLogger | None = None,
) -> bool:
    """Push a local branch to the branch of the same name on a remote.

    Returns:
        True if the remote accepted the update, False if it was refused.

    Raises:
        TransportError: If the push could not be carried out.
    """
    logger = logger or create_null_logger()
    refspec = f"refs/heads/{branch_name}:refs/heads/{branch_name}"
    stream = ProgressStream(progress)
    try:
        result = porcelain.push(
            repo,
            remote_name,
            refspec,
            outstream=stream,
            errstream=stream,
            **_auth_kwargs(credentials),
        )
    except porcelain.DivergedBranches:
        logger.warning(
            "push_rejected", remote=remote_name, branch=branch_name, reason="diverged"
        )
        return False
    except _TRANSPORT_ERRORS as e:
        msg = f"Failed to push {branch_name} to {remote_name}: {e}"
        raise TransportError(msg, remote=remote_name, operation="push") from e
    finally:
        stream.flush()

    rejected = {
        ref.decode("utf-8", errors="replace"): error
        for ref, error in (result.ref_status or {}).items()
        if error is not None
    }
    if rejected:
        logger.warning(
            "push_rejected", remote=remote_name, branch=branch_name, refs=rejected
        )
        return False

    logger.info("push_completed", remote=remote_name, branch=branch_name)
    return True


def fetch(
    repo: Repo,
    remote_name: str,
    *,
    credentials: Credentials | None = None,
    progress: ProgressCallback | None = None,
    logger: FilteringBoundLogger | None = None,
) -> None:
    """Fetch a remote and update its ``refs/remotes/<remote>/*`` refs.

    Raises:
        TransportError: If the fetch could not be carried out.
    """
    logger = logger or create_null_logger()
    stream = ProgressStream(progress)
    try:
        porcelain.fetch(
            repo,
            remote_name,
            outstream=io.StringIO(),
            errstream=stream,
            **_auth_kwargs(credentials),
        )
    except _TRANSPORT_ERRORS as e:
        msg = f"Failed to fetch {remote_name}: {e}"
        raise TransportError(msg, remote=remote_name, operation="fetch") from e
    finally:
        stream.flush()

    logger.info("fetch_completed", remote=remote_name)
