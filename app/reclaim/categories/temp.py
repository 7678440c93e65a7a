"""Temporary file detector.

Reports editor backups, swap files and ``*.tmp`` style leftovers that
have not been modified for at least ``min_age_days``.
"""

import fnmatch
import time
from collections.abc import Iterator, Sequence
from pathlib import Path

from reclaim.categories.base import CategoryDetector
from reclaim.models.scan_result import Category
from reclaim.utils.fs import age_days

TEMP_FILE_PATTERNS: tuple[str, ...] = (
    "*.tmp",
    "*.temp",
    "*~",
    "*.swp",
    "*.swo",
    "*.bak",
    ".#*",
    "#*#",
    ".DS_Store",
    "Thumbs.db",
)


def is_temp_name(name: str) -> bool:
    """Check whether a file name looks like a temporary file."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in TEMP_FILE_PATTERNS)


class TempDetector(CategoryDetector):
    """Finds stale temporary files below a root.

    Args:
        min_age_days: Minimum days since last modification.
        exclusions: fnmatch patterns that are never reported.
        now: Reference UNIX time, for deterministic tests.
    """

    def __init__(
        self,
        min_age_days: int = 1,
        exclusions: Sequence[str] = (),
        *,
        now: float | None = None,
    ) -> None:
        super().__init__(exclusions)
        self._min_age_days = min_age_days
        self._now = now

    @property
    def category(self) -> Category:
        return Category.TEMP

    def find(self, root: Path) -> Iterator[Path]:
        now = self._now if self._now is not None else time.time()
        for current, _, filenames in self.walk(root):
            for name in filenames:
                if not is_temp_name(name):
                    continue
                path = current / name
                if self.is_excluded(path):
                    continue
                age = age_days(path, now)
                if age is not None and age >= self._min_age_days:
                    yield path
