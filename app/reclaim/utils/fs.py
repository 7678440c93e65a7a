"""Filesystem measurement helpers shared by detectors and the restore engine."""

import fnmatch
import os
import time
from collections.abc import Iterable
from pathlib import Path

_SECONDS_PER_DAY = 86400


def get_size(path: Path) -> int | None:
    """Get size in bytes for a path.

    For files and symlinks, returns the size of the entry itself. For
    directories, returns the sum of all files recursively. Returns None
    if the path cannot be measured.

    Args:
        path: Path to measure.

    Returns:
        Size in bytes, or None if unavailable.
    """
    try:
        if path.is_symlink() or path.is_file():
            return path.lstat().st_size

        if path.is_dir():
            total = 0
            for child in path.rglob("*"):
                try:
                    if child.is_file() and not child.is_symlink():
                        total += child.stat().st_size
                except OSError:
                    continue
            return total
    except OSError:
        return None

    return None


def age_days(path: Path, now: float | None = None) -> float | None:
    """Days since the path was last modified.

    Args:
        path: Path to check (symlinks are not followed).
        now: Reference time as a UNIX timestamp. Defaults to the current time.

    Returns:
        Age in days, or None if the path cannot be stat'ed.
    """
    try:
        mtime = path.lstat().st_mtime
    except OSError:
        return None
    reference = now if now is not None else time.time()
    return max(0.0, (reference - mtime) / _SECONDS_PER_DAY)


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """Check if a path matches any exclusion pattern.

    Patterns starting with ~ are expanded to the user's home directory.

    Args:
        path: Absolute path to check.
        patterns: fnmatch-style patterns.

    Returns:
        True if the path matches at least one pattern.
    """
    for pattern in patterns:
        expanded = os.path.expanduser(pattern)
        if fnmatch.fnmatch(path, expanded):
            return True
    return False
