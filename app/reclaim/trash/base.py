"""Abstract trash store capability.

This module defines the TrashEntry value type and the TrashStore
interface that every trash implementation must provide. The restore
engine depends only on this interface, never on a concrete store.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


class TrashStoreError(Exception):
    """Raised when a trash store cannot be enumerated or an entry cannot be moved."""


@dataclass(frozen=True, slots=True)
class TrashEntry:
    """An item currently held by the trash store.

    Attributes:
        original_parent: Directory the item was deleted from.
        name: Leaf name of the item at deletion time.
        deleted_at: Deletion time as reported by the store, if known.
        handle: Store-specific data needed to restore the entry. Opaque to
            everything but the store that produced it.
    """

    original_parent: str
    name: str
    deleted_at: str | None = None
    handle: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Trash entry name cannot be empty"
            raise ValueError(msg)

    @property
    def original_path(self) -> str:
        """Reconstructed original location (parent joined with name)."""
        return os.path.join(self.original_parent, self.name)


class TrashStore(ABC):
    """Abstract base class for trash store capabilities.

    Example:
        >>> store = FreeDesktopTrash()
        >>> for entry in store.list():
        ...     print(entry.original_path)
    """

    @abstractmethod
    def list(self) -> Sequence[TrashEntry]:
        """Enumerate the entries currently in the trash store.

        Returns:
            A snapshot of the current entries.

        Raises:
            TrashStoreError: If the store cannot be enumerated.
        """

    @abstractmethod
    def restore(self, entry: TrashEntry) -> None:
        """Move an entry back to its original location.

        Implementations do not check whether the destination exists; that
        policy belongs to the caller.

        Args:
            entry: An entry returned by list().

        Raises:
            TrashStoreError: If the entry cannot be restored.
        """

    def size_of(self, entry: TrashEntry) -> int | None:
        """Size of an entry while it is still in the trash.

        Returns:
            Size in bytes, or None if the store cannot tell.
        """
        return None

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this trash store can be used on the current system.

        Returns:
            True if the store can be used, False otherwise.
        """
