"""Restore result models.

RestoreResult is an immutable tally. The restore engine folds one
RestoreResult per processed record, so every intermediate value is a
consistent snapshot that can be handed to progress observers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from reclaim.utils.formatting import format_size


class RestoreOutcome(str, Enum):
    """Outcome of processing one deletion record.

    Attributes:
        RESTORED: The item (or at least one child of a directory) was restored.
        FAILED: Matching trash entries were found but none could be restored.
        NOT_FOUND: No trash entry corresponds to the record.
    """

    RESTORED = "restored"
    FAILED = "failed"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class RestoreResult:
    """Aggregated result of a restore operation.

    Attributes:
        restored: Records restored (a directory counts once).
        restored_bytes: Logged size of restored records.
        errors: Restore attempts that matched a trash entry but failed.
        not_found: Records without a corresponding trash entry.
    """

    restored: int = 0
    restored_bytes: int = 0
    errors: int = 0
    not_found: int = 0

    @property
    def processed(self) -> int:
        """Sum of all buckets."""
        return self.restored + self.errors + self.not_found

    @property
    def has_errors(self) -> bool:
        """Whether at least one restore attempt failed."""
        return self.errors > 0

    def add_restored(self, size_bytes: int) -> RestoreResult:
        """Return a copy with one more restored record."""
        return replace(
            self,
            restored=self.restored + 1,
            restored_bytes=self.restored_bytes + size_bytes,
        )

    def add_errors(self, count: int = 1) -> RestoreResult:
        """Return a copy with ``count`` more failed attempts."""
        return replace(self, errors=self.errors + count)

    def add_not_found(self) -> RestoreResult:
        """Return a copy with one more record missing from the trash store."""
        return replace(self, not_found=self.not_found + 1)

    def summary(self) -> str:
        """Human-readable one-line summary.

        Returns:
            e.g. ``Restored 5 items (1.0 MiB), 1 errors, 2 not found``.
        """
        return (
            f"Restored {self.restored} items ({format_size(self.restored_bytes)}), "
            f"{self.errors} errors, {self.not_found} not found"
        )


@dataclass(frozen=True, slots=True)
class RestoreProgress:
    """Snapshot handed to progress observers.

    ``path`` is the record about to be attempted, or None for the final
    notification once every record has been processed.

    Attributes:
        path: Path about to be restored, None on completion.
        restored: Running count of restored records.
        total: Number of restorable records in the batch.
        errors: Running count of failed attempts.
        not_found: Running count of records missing from the trash store.
    """

    path: str | None
    restored: int
    total: int
    errors: int
    not_found: int

    @property
    def done(self) -> bool:
        """True for the terminal notification."""
        return self.path is None

    @property
    def processed(self) -> int:
        """Sum of the running counters (failed directory children count individually)."""
        return self.restored + self.errors + self.not_found

    @classmethod
    def from_result(cls, path: str | None, result: RestoreResult, total: int) -> RestoreProgress:
        """Build a snapshot from the running result."""
        return cls(
            path=path,
            restored=result.restored,
            total=total,
            errors=result.errors,
            not_found=result.not_found,
        )
