"""Abstract base class for category detectors.

A detector finds reclaimable items of one category below a root path and
knows how to remove a single item it reported.
"""

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path

from reclaim.categories.remover import RemovalResult, Remover
from reclaim.models.scan_result import Category, CategoryScan
from reclaim.utils.fs import get_size, is_excluded

logger = logging.getLogger(__name__)

# Never descended into: version control metadata is not reclaimable
_SKIP_DIRS: frozenset[str] = frozenset({".git", ".hg", ".svn"})


class CategoryDetector(ABC):
    """Abstract base class for all category detectors.

    Args:
        exclusions: fnmatch patterns; matching paths are never reported.

    Example:
        >>> detector = CacheDetector()
        >>> scan = detector.scan(Path.home() / "src")
        >>> print(scan.items, format_size(scan.size_bytes))
    """

    def __init__(self, exclusions: Sequence[str] = ()) -> None:
        self._exclusions = tuple(exclusions)

    @property
    @abstractmethod
    def category(self) -> Category:
        """Return the category this detector handles."""

    @abstractmethod
    def find(self, root: Path) -> Iterator[Path]:
        """Yield reclaimable paths below ``root``.

        Implementations should use walk() so that exclusions are applied.

        Raises:
            OSError: If the root cannot be read at all.
        """

    def is_available(self) -> bool:
        """Check if this detector can run on the current system."""
        return True

    def scan(self, root: Path) -> CategoryScan:
        """Collect every reclaimable item with its size.

        Args:
            root: Directory to scan.

        Returns:
            CategoryScan with paths in discovery order.
        """
        paths: list[str] = []
        sizes: dict[str, int] = {}
        for path in self.find(root):
            key = str(path)
            if key in sizes:
                continue
            paths.append(key)
            sizes[key] = get_size(path) or 0

        logger.debug("%s: %d items below %s", self.category.value, len(paths), root)
        return CategoryScan(
            category=self.category,
            paths=tuple(paths),
            size_bytes=sum(sizes.values()),
            sizes=sizes,
        )

    def clean(self, path: str, remover: Remover) -> RemovalResult:
        """Remove one item previously reported by scan().

        Args:
            path: Path from CategoryScan.paths.
            remover: Removal strategy (trash or permanent, dry-run).

        Returns:
            RemovalResult for the path.
        """
        return remover.remove(path)

    def walk(self, root: Path) -> Iterator[tuple[Path, list[str], list[str]]]:
        """os.walk() below ``root`` that honours exclusions.

        Excluded and version-control directories are pruned; callers may
        prune further by removing names from the yielded directory list.
        Unreadable subdirectories are skipped with a debug message.

        Raises:
            FileNotFoundError: If root does not exist.
            NotADirectoryError: If root is not a directory.
        """
        if not root.exists():
            raise FileNotFoundError(f"Path does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        def _on_error(error: OSError) -> None:
            logger.debug("Skipping unreadable directory: %s", error)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            current = Path(dirpath)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in _SKIP_DIRS and not self.is_excluded(current / name)
            )
            yield current, dirnames, sorted(filenames)

    def is_excluded(self, path: Path) -> bool:
        """Check a path against the configured exclusion patterns."""
        return bool(self._exclusions) and is_excluded(str(path), self._exclusions)
