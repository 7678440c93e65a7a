"""Cache directory detector.

Reports directories that tools recreate on demand: Python bytecode and
linter caches, generic ``.cache`` directories and similar.
"""

from collections.abc import Iterator
from pathlib import Path

from reclaim.categories.base import CategoryDetector
from reclaim.models.scan_result import Category

CACHE_DIR_NAMES: frozenset[str] = frozenset(
    {
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".hypothesis",
        ".tox",
        ".nox",
        ".cache",
        ".parcel-cache",
        ".eslintcache",
        ".sass-cache",
        ".gradle",
        ".turbo",
    }
)


class CacheDetector(CategoryDetector):
    """Finds cache directories below a root."""

    @property
    def category(self) -> Category:
        return Category.CACHE

    def find(self, root: Path) -> Iterator[Path]:
        for current, dirnames, _ in self.walk(root):
            for name in list(dirnames):
                if name in CACHE_DIR_NAMES:
                    # Report the cache as a whole, don't descend
                    dirnames.remove(name)
                    yield current / name
