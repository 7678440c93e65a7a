"""Trash store capabilities.

This package provides the TrashStore interface consumed by the restore
engine, a FreeDesktop.org implementation for Linux desktops, and an
in-memory implementation.
"""

from reclaim.trash.base import TrashEntry, TrashStore, TrashStoreError
from reclaim.trash.freedesktop import FreeDesktopTrash, TrashLocation, parse_trashinfo
from reclaim.trash.memory import MemoryTrash

__all__ = [
    "FreeDesktopTrash",
    "MemoryTrash",
    "TrashEntry",
    "TrashLocation",
    "TrashStore",
    "TrashStoreError",
    "parse_trashinfo",
]
