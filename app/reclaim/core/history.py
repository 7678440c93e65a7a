"""Deletion history storage.

This module provides the HistoryStore class for persisting and querying
deletion logs. Every cleaning session is written once, atomically, to its
own JSONL file in the history directory:

    ~/.local/state/reclaim/history/20260117T093000123456Z-000042.jsonl

The file stem is the session identifier. It starts with the UTC creation
time and ends with a store-wide sequence number, zero-padded to at least
six digits. Sessions are ordered by creation time, ties broken by the
numeric sequence.
"""

import json
import logging
import os
import re
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from reclaim.core.paths import ensure_history_dir, get_history_dir
from reclaim.models.history import DeletionLog, DeletionRecord, create_deletion_log

logger = logging.getLogger(__name__)

LOG_SUFFIX = ".jsonl"

_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"
_LOG_ID_PATTERN = re.compile(r"^(?P<stamp>\d{8}T\d{12}Z)-(?P<seq>\d{6,})$")


class HistoryError(Exception):
    """Base exception for history storage errors."""


class HistoryLogNotFoundError(HistoryError):
    """Raised when a session log does not exist (anymore)."""


class HistoryLogParseError(HistoryError):
    """Raised when a session log cannot be parsed."""


def make_log_id(created_at: datetime, sequence: int) -> str:
    """Build a session identifier.

    Args:
        created_at: Session creation time (converted to UTC).
        sequence: Store-wide insertion sequence number, zero-padded to
            six digits. Longer numbers are kept whole.

    Returns:
        Identifier such as ``20260117T093000123456Z-000042``.
    """
    stamp = created_at.astimezone(UTC).strftime(_TIMESTAMP_FORMAT)
    return f"{stamp}-{sequence:06d}"


def is_log_id(value: str) -> bool:
    """Check whether a string is a well-formed session identifier."""
    return _LOG_ID_PATTERN.match(value) is not None


def _order_key(log_id: str) -> tuple[str, int]:
    """Sort key of a well-formed identifier: timestamp, then sequence."""
    stamp, _, sequence = log_id.rpartition("-")
    return stamp, int(sequence)


class HistoryStore:
    """Manages deletion logs in a directory of JSONL files.

    Storage location: ~/.local/state/reclaim/history/

    The store is single-writer: a session becomes visible only once its
    file has been atomically renamed into place, so concurrent readers
    never see a partially written log.

    Attributes:
        history_dir: Directory containing the session logs.
    """

    def __init__(self, history_dir: Path | None = None) -> None:
        """Initialize HistoryStore.

        Args:
            history_dir: Optional override for the history directory.
                         Default: ~/.local/state/reclaim/history
        """
        self._history_dir = history_dir if history_dir is not None else get_history_dir()

    @property
    def history_dir(self) -> Path:
        """Directory containing the session logs."""
        return self._history_dir

    def log_path(self, log_id: str) -> Path:
        """Path of the file backing a session log."""
        return self._history_dir / f"{log_id}{LOG_SUFFIX}"

    def list_logs(self) -> list[str]:
        """List session identifiers, newest first.

        Returns:
            Session identifiers ordered by creation time (newest first),
            ties broken by insertion order. Empty if no session was ever
            recorded.

        Raises:
            HistoryError: If the history directory cannot be read.
        """
        try:
            if not self._history_dir.exists():
                return []
            names = [p.name for p in self._history_dir.iterdir()]
        except OSError as e:
            raise HistoryError(f"Cannot read history directory {self._history_dir}: {e}") from e

        log_ids = [
            name[: -len(LOG_SUFFIX)]
            for name in names
            if name.endswith(LOG_SUFFIX) and is_log_id(name[: -len(LOG_SUFFIX)])
        ]
        log_ids.sort(key=_order_key, reverse=True)
        return log_ids

    def load_log(self, log_id: str) -> DeletionLog:
        """Load a session log.

        Args:
            log_id: Session identifier as returned by list_logs().

        Returns:
            The parsed DeletionLog.

        Raises:
            HistoryLogNotFoundError: If the log does not exist.
            HistoryLogParseError: If the log content is invalid.
            HistoryError: If the log file cannot be read.
        """
        if not is_log_id(log_id):
            raise HistoryLogNotFoundError(f"No deletion log with ID '{log_id}'")

        path = self.log_path(log_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise HistoryLogNotFoundError(f"Deletion log no longer exists: {log_id}") from e
        except OSError as e:
            raise HistoryError(f"Cannot read deletion log {path}: {e}") from e

        try:
            log = DeletionLog.from_json_lines(text)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise HistoryLogParseError(f"Corrupt deletion log {log_id}: {e}") from e

        if log.id != log_id:
            raise HistoryLogParseError(
                f"Corrupt deletion log {log_id}: header ID is '{log.id}'"
            )
        return log

    def latest_log(self) -> DeletionLog | None:
        """Load the most recent session log.

        Returns:
            The newest DeletionLog, or None if the store is empty.

        Raises:
            HistoryError: If the store or the newest log cannot be read.
        """
        log_ids = self.list_logs()
        if not log_ids:
            return None
        return self.load_log(log_ids[0])

    def record_session(
        self,
        records: list[DeletionRecord],
        metadata: dict[str, Any] | None = None,
        created_at: datetime | None = None,
    ) -> DeletionLog:
        """Write a completed cleaning session.

        Allocates a new session identifier and writes the log atomically
        (temporary file + os.replace). Existing logs are never touched.

        Args:
            records: Deletion records in the order they were attempted.
            metadata: Optional additional context (command, root, ...).
            created_at: Session creation time. Defaults to now (UTC).

        Returns:
            The DeletionLog that was written.

        Raises:
            HistoryError: If the log cannot be written.
        """
        created = created_at or datetime.now(UTC)
        self._ensure_dir()

        log_id = make_log_id(created, self._next_sequence())
        log = create_deletion_log(log_id, records, metadata=metadata, created_at=created)
        self._write_atomic(self.log_path(log_id), log.to_json_lines())

        logger.debug("Recorded deletion log %s (%d records)", log_id, len(records))
        return log

    def prune(self, keep: int) -> list[str]:
        """Delete all but the ``keep`` newest session logs.

        Args:
            keep: Number of newest logs to retain.

        Returns:
            Identifiers of the logs that were deleted.

        Raises:
            HistoryError: If the history directory cannot be read.
        """
        if keep < 0:
            msg = f"keep must be >= 0, got {keep}"
            raise ValueError(msg)

        removed: list[str] = []
        for log_id in self.list_logs()[keep:]:
            try:
                self.log_path(log_id).unlink()
                removed.append(log_id)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Cannot remove old deletion log %s: %s", log_id, e)
        return removed

    def _ensure_dir(self) -> None:
        """Create the history directory, mapping failures to HistoryError."""
        try:
            if self._history_dir == get_history_dir():
                ensure_history_dir()
            else:
                self._history_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, RuntimeError) as e:
            raise HistoryError(f"Cannot create history directory: {e}") from e

    def _next_sequence(self) -> int:
        """Next insertion sequence number (one past the highest in use)."""
        highest = 0
        for log_id in self.list_logs():
            match = _LOG_ID_PATTERN.match(log_id)
            if match:
                highest = max(highest, int(match.group("seq")))
        return highest + 1

    def _write_atomic(self, path: Path, content: str) -> None:
        """Write a new file atomically, refusing to replace an existing log."""
        if path.exists():
            raise HistoryError(f"Deletion log already exists: {path.name}")

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(str(tmp_path), str(path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise HistoryError(f"Failed to write deletion log {path.name}: {e}") from e
