"""Canonical exclude patterns for discovery triggers and file watching.

Tier 0 (HARDCODED_DIRS): Never watched, not user-configurable.
    - VCS internals, hdltest data directory

Tier 1 (DEFAULT_EXCLUDED_DIRS): Excluded by default, replaceable via
    ``discovery.excluded_dirs`` in config.
    - dbt build output and dependency lock directories, simulator scratch dirs

Entries may be fnmatch patterns (``BUILD-*``). Matching is per path
component, so ``a/BUILD-DEFAULT/x.sv`` is excluded but ``a/BUILD.go`` is not.
"""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import PurePath

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        # hdltest data
        ".hdltest",
    )
)

DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = (
    # dbt build metadata and outputs (one BUILD-<profile> dir per build profile)
    "BUILD-*",
    ".dbt",
    # dbt dependency checkout / lock directory
    "DEPS",
    # Simulator scratch directories
    "xsim.dir",
    "xcelium.d",
    "work",
    "obj_dir",
)


def is_excluded_path(path: PurePath | str, patterns: Iterable[str] = DEFAULT_EXCLUDED_DIRS) -> bool:
    """Check whether any component of *path* matches an exclude pattern."""
    parts = PurePath(path).parts
    pattern_list = [*HARDCODED_DIRS, *patterns]
    return any(fnmatchcase(part, pattern) for part in parts for pattern in pattern_list)
