"""Trash contents detector.

Reports the items currently held by the FreeDesktop.org trash. Cleaning
this category erases them permanently, whatever removal mode the clean
run uses, since they are already in the trash.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from reclaim.categories.base import CategoryDetector
from reclaim.categories.remover import RemovalResult, Remover
from reclaim.models.scan_result import Category
from reclaim.trash.base import TrashStoreError
from reclaim.trash.freedesktop import FreeDesktopTrash

logger = logging.getLogger(__name__)


class TrashDetector(CategoryDetector):
    """Lists trashed items; the scan root is ignored.

    Reported paths are the on-disk locations of the items inside the
    trash (``Trash/files/<name>``), not their original locations.

    Args:
        store: Trash store to inspect. Defaults to the home trash.
    """

    def __init__(self, store: FreeDesktopTrash | None = None) -> None:
        super().__init__()
        self._store = store if store is not None else FreeDesktopTrash()

    @property
    def category(self) -> Category:
        return Category.TRASH

    def is_available(self) -> bool:
        return self._store.is_available()

    def find(self, root: Path) -> Iterator[Path]:
        for entry in self._store.list():
            yield self._store.location(entry).data_path

    def clean(self, path: str, remover: Remover) -> RemovalResult:
        """Permanently erase one trashed item.

        Args:
            path: Data path reported by scan().
            remover: Only its dry_run flag is honoured.

        Returns:
            RemovalResult, always marked permanent.
        """
        if remover.dry_run:
            logger.info("Dry-run: would erase %s", path)
            return RemovalResult(path=path, success=True, permanent=True, dry_run=True)

        try:
            self._store.purge_path(Path(path))
        except TrashStoreError as e:
            logger.info("Failed to erase %s: %s", path, e)
            return RemovalResult(path=path, success=False, permanent=True, error=str(e))
        return RemovalResult(path=path, success=True, permanent=True)
