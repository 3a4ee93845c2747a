"""Repository facade.

Classes:
    SimpleRepository: Explicit handle on a git working copy.
    ProgressStream: Byte stream forwarding transport progress to a callback.

Models:
    CommitResult: Result of a commit operation.
    LsFileEntry: One file listed by ``ls_files``.
    Credentials: Username and password for HTTP(S) remotes.
"""

from simplerepo.repository._models import CommitResult, Credentials, LsFileEntry
from simplerepo.repository._repository import SimpleRepository
from simplerepo.repository._transport import ProgressCallback, ProgressStream

__all__ = [
    "CommitResult",
    "Credentials",
    "LsFileEntry",
    "ProgressCallback",
    "ProgressStream",
    "SimpleRepository",
]
