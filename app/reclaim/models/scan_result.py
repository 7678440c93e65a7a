"""Scan and clean result models.

This module defines the per-category scan output produced by detectors,
the aggregated result of a multi-category scan, and the report of a
clean run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from reclaim.models.history import DeletionRecord


class Category(str, Enum):
    """Reclaimable space categories.

    Attributes:
        CACHE: Tool and application cache directories.
        TEMP: Temporary and editor backup files.
        BUILD: Build artifacts of inactive projects.
        TRASH: Entries currently held by the trash store.
    """

    CACHE = "cache"
    TEMP = "temp"
    BUILD = "build"
    TRASH = "trash"


@dataclass(frozen=True, slots=True)
class CategoryScan:
    """Items found by one category detector.

    Attributes:
        category: Category the items belong to.
        paths: Absolute paths of the reclaimable items.
        size_bytes: Combined size of the items.
        sizes: Size of each item, keyed by path.
    """

    category: Category
    paths: tuple[str, ...] = ()
    size_bytes: int = 0
    sizes: dict[str, int] = field(default_factory=lambda: {})

    @property
    def items(self) -> int:
        """Number of reclaimable items."""
        return len(self.paths)

    def size_of(self, path: str) -> int:
        """Size recorded for a path (0 when unknown)."""
        return self.sizes.get(path, 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "items": self.items,
            "size_bytes": self.size_bytes,
            "paths": list(self.paths),
        }


@dataclass(frozen=True, slots=True)
class ScanResults:
    """Aggregated result of scanning several categories.

    Attributes:
        root: Root path that was scanned.
        categories: Scan output per category, in scan order.
        warnings: Messages for categories whose detector failed.
    """

    root: str
    categories: dict[Category, CategoryScan] = field(default_factory=lambda: {})
    warnings: tuple[str, ...] = ()

    @property
    def total_items(self) -> int:
        """Number of items across all categories."""
        return sum(scan.items for scan in self.categories.values())

    @property
    def total_bytes(self) -> int:
        """Combined size across all categories."""
        return sum(scan.size_bytes for scan in self.categories.values())

    def get(self, category: Category) -> CategoryScan:
        """Scan output of a category (empty if it was not scanned)."""
        return self.categories.get(category, CategoryScan(category=category))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "root": self.root,
            "categories": {cat.value: scan.to_dict() for cat, scan in self.categories.items()},
            "total_items": self.total_items,
            "total_bytes": self.total_bytes,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True, slots=True)
class CleanReport:
    """Outcome of a clean run.

    Attributes:
        records: One record per attempted removal, in attempt order.
        cleaned: Number of items removed.
        errors: Number of failed removals.
        authorized: Whether the caller authorized the batch.
    """

    records: tuple[DeletionRecord, ...] = ()
    cleaned: int = 0
    errors: int = 0
    authorized: bool = True

    @property
    def freed_bytes(self) -> int:
        """Logged size of everything that was removed."""
        return sum(r.size_bytes for r in self.records if r.success)

    def summary(self) -> str:
        """One-line summary of the run."""
        if self.errors:
            return (
                f"Cleanup complete. {self.cleaned} items cleaned, "
                f"{self.errors} errors encountered."
            )
        return f"Cleanup complete. {self.cleaned} items cleaned."
