"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be passed straight to deep_merge,
which always returns copies.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "warning",
        "format": "text",
        "file": "",
    },
    "status": {
        "trust_stat_info": True,
        "include_ignored": False,
        "recurse_submodules": False,
    },
    "changes": {
        "detect_renames": True,
    },
    "remote": {
        "name": "origin",
        "branch": "",
    },
    "author": {
        "name": "",
        "email": "",
    },
}
