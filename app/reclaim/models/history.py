"""Deletion history models.

This module defines the records written for every deletion attempt of a
cleaning session, and the session-scoped log that groups them. Logs are
serialized as JSON Lines: one header line describing the session followed
by one line per record, in the order the deletions were attempted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class DeletionRecord:
    """Outcome of a single deletion attempt.

    Attributes:
        path: Absolute, platform-native path of the item at deletion time.
        success: Whether the deletion attempt completed.
        permanent: Whether the deletion bypassed the trash store.
        size_bytes: Size of the item when it was deleted.
        category: Category that discovered the item (e.g. "cache").
        error: Error message if the deletion failed, None otherwise.
    """

    path: str
    success: bool
    permanent: bool = False
    size_bytes: int = 0
    category: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.path:
            msg = "Deletion record path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def is_restorable(self) -> bool:
        """Whether the item may still be sitting in the trash store."""
        return self.success and not self.permanent

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the record.
        """
        result: dict[str, Any] = {
            "path": self.path,
            "success": self.success,
            "permanent": self.permanent,
            "size_bytes": self.size_bytes,
        }
        if self.category is not None:
            result["category"] = self.category
        if self.error is not None:
            result["error"] = self.error
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeletionRecord:
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing record data.

        Returns:
            DeletionRecord instance.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If field values are invalid or of the wrong type.
        """
        path = data["path"]
        success = data["success"]
        permanent = data.get("permanent", False)
        size_bytes = data.get("size_bytes", 0)
        category = data.get("category")
        error = data.get("error")

        if not isinstance(path, str):
            msg = f"Record path must be a string, got {path!r}"
            raise ValueError(msg)
        if not isinstance(success, bool) or not isinstance(permanent, bool):
            msg = f"Record flags must be booleans for {path}"
            raise ValueError(msg)
        # bool is an int subclass
        if isinstance(size_bytes, bool) or not isinstance(size_bytes, int):
            msg = f"Record size must be an integer for {path}, got {size_bytes!r}"
            raise ValueError(msg)
        if not isinstance(category, str | None) or not isinstance(error, str | None):
            msg = f"Record category and error must be strings for {path}"
            raise ValueError(msg)

        return cls(
            path=path,
            success=success,
            permanent=permanent,
            size_bytes=size_bytes,
            category=category,
            error=error,
        )


@dataclass(frozen=True, slots=True)
class DeletionLog:
    """All deletion attempts of one cleaning session.

    A log is written once, when its session completes, and never modified
    afterwards.

    Attributes:
        id: Session identifier (also the stem of the log file).
        created_at: Session creation time (ISO 8601 with timezone).
        records: Deletion records in the order they were attempted.
        metadata: Additional context (command, root path, ...).
    """

    id: str
    created_at: str
    records: tuple[DeletionRecord, ...]
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate log data after initialization."""
        if not self.id:
            msg = "Deletion log ID cannot be empty"
            raise ValueError(msg)
        if not self.created_at:
            msg = "Creation timestamp cannot be empty"
            raise ValueError(msg)

    @property
    def restorable_records(self) -> tuple[DeletionRecord, ...]:
        """Records that were moved to the trash store successfully."""
        return tuple(r for r in self.records if r.is_restorable)

    @property
    def restorable_count(self) -> int:
        """Number of records that can potentially be restored."""
        return sum(1 for r in self.records if r.is_restorable)

    @property
    def restorable_bytes(self) -> int:
        """Sum of logged sizes of restorable records."""
        return sum(r.size_bytes for r in self.records if r.is_restorable)

    @property
    def total_bytes(self) -> int:
        """Sum of logged sizes of all successful deletions."""
        return sum(r.size_bytes for r in self.records if r.success)

    def header_dict(self) -> dict[str, Any]:
        """Serialize the session header (everything except the records)."""
        return {
            "id": self.id,
            "created_at": self.created_at,
            "metadata": self.metadata,
        }

    def to_json_lines(self) -> str:
        """Serialize to JSON Lines.

        Returns:
            Header line followed by one line per record, newline-terminated.
        """
        lines = [json.dumps(self.header_dict(), separators=(",", ":"))]
        lines.extend(json.dumps(r.to_dict(), separators=(",", ":")) for r in self.records)
        return "\n".join(lines) + "\n"

    @classmethod
    def from_json_lines(cls, text: str) -> DeletionLog:
        """Deserialize from JSON Lines.

        Blank lines are ignored. The first non-blank line must be the
        session header.

        Args:
            text: Complete content of a session log file.

        Returns:
            DeletionLog instance.

        Raises:
            json.JSONDecodeError: If a line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If the log is empty or data is invalid.
        """
        lines = [line for line in text.splitlines() if line.strip()]
        if not lines:
            msg = "Deletion log is empty"
            raise ValueError(msg)

        header = json.loads(lines[0])
        records = tuple(DeletionRecord.from_dict(json.loads(line)) for line in lines[1:])
        return cls(
            id=header["id"],
            created_at=header["created_at"],
            records=records,
            metadata=header.get("metadata", {}),
        )


def create_deletion_log(
    log_id: str,
    records: list[DeletionRecord],
    metadata: dict[str, Any] | None = None,
    created_at: datetime | None = None,
) -> DeletionLog:
    """Factory function to create a new DeletionLog.

    Args:
        log_id: Session identifier, usually allocated by the history store.
        records: Records in the order the deletions were attempted.
        metadata: Optional additional context.
        created_at: Session creation time. Defaults to now (UTC).

    Returns:
        New DeletionLog.
    """
    timestamp = (created_at or datetime.now(UTC)).isoformat()
    return DeletionLog(
        id=log_id,
        created_at=timestamp,
        records=tuple(records),
        metadata=metadata or {},
    )
