"""In-memory trash store.

A TrashStore that keeps its entries in a list. Lets the restore engine be
exercised without a desktop trash directory.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from reclaim.trash.base import TrashEntry, TrashStore, TrashStoreError

logger = logging.getLogger(__name__)


class MemoryTrash(TrashStore):
    """Trash store holding entries in memory.

    Restoring an entry removes it from the store and, when ``materialize``
    is set, writes an empty file at the original location so that
    filesystem checks after the restore behave as with a real store.

    Args:
        entries: Initial entries.
        materialize: Create a file at the destination on restore.
        fail_on: Optional predicate; entries for which it returns True
            fail to restore with TrashStoreError.
        sizes: Optional sizes reported by size_of(), keyed by original path.
    """

    def __init__(
        self,
        entries: Iterable[TrashEntry] = (),
        *,
        materialize: bool = False,
        fail_on: Callable[[TrashEntry], bool] | None = None,
        sizes: Mapping[str, int] | None = None,
    ) -> None:
        self._entries: list[TrashEntry] = list(entries)
        self._materialize = materialize
        self._fail_on = fail_on
        self._sizes = dict(sizes or {})
        self.restored: list[TrashEntry] = []
        self.list_calls = 0

    @classmethod
    def from_paths(cls, paths: Iterable[str], **kwargs: object) -> MemoryTrash:
        """Build a store with one entry per original path."""
        entries = []
        for path in paths:
            parent, _, name = path.replace("\\", "/").rpartition("/")
            entries.append(TrashEntry(original_parent=parent or "/", name=name))
        return cls(entries, **kwargs)  # type: ignore[arg-type]

    def is_available(self) -> bool:
        """Always available."""
        return True

    def list(self) -> list[TrashEntry]:
        """Return a snapshot of the current entries."""
        self.list_calls += 1
        return list(self._entries)

    def size_of(self, entry: TrashEntry) -> int | None:
        """Size given at construction, None if unknown."""
        return self._sizes.get(entry.original_path)

    def restore(self, entry: TrashEntry) -> None:
        """Remove the entry from the store (and optionally materialize it).

        Raises:
            TrashStoreError: If the entry is not in the store or the
                failure predicate matches it.
        """
        if entry not in self._entries:
            raise TrashStoreError(f"Entry not in trash: {entry.original_path}")
        if self._fail_on is not None and self._fail_on(entry):
            raise TrashStoreError(f"Simulated restore failure: {entry.original_path}")

        if self._materialize:
            destination = Path(entry.original_path)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.touch()

        self._entries.remove(entry)
        self.restored.append(entry)
        logger.debug("Restored in-memory entry %s", entry.original_path)
