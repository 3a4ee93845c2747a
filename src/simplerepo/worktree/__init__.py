"""Working tree access.

Classes:
    WorkingTreeScanner: Lists files and computes content hashes
    IgnoreRules: Gitignore-style ignore decisions
    IgnoreConfig: Where ignore patterns come from

Models:
    WorkingTreeEntry: A file seen during a scan
"""

from ._ignore import IgnoreConfig, IgnoreRules, load_gitignore_patterns
from ._models import WorkingTreeEntry
from ._scanner import WorkingTreeScanner

__all__ = [
    "IgnoreConfig",
    "IgnoreRules",
    "WorkingTreeEntry",
    "WorkingTreeScanner",
    "load_gitignore_patterns",
]
