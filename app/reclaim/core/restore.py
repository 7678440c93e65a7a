"""Restore-reconciliation engine.

Maps deletion records back onto entries that are currently in the trash
store and moves them back to their original locations.

Matching works on normalized original paths:

1. An index of live trash entries is built from a single ``list()``
   snapshot, keyed by the normalized reconstructed original path. The
   index is local to one call and never reused.
2. Every restorable record is looked up by exact key first. A miss falls
   back to directory reconstruction: a deleted directory may be held by
   the trash as one entry per former leaf file, so every entry whose key
   starts with ``<record path>/`` is restored individually.

Per-record failures are tallied and reported without aborting the batch.
Failures to enumerate the trash store, to read the history, or raised by
the progress callback abort the whole operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from rich.markup import escape

from reclaim.core.activity import ActivityLog
from reclaim.core.history import HistoryStore
from reclaim.core.normalize import PathNormalizer
from reclaim.models.history import DeletionLog, DeletionRecord
from reclaim.models.restore import RestoreOutcome, RestoreProgress, RestoreResult
from reclaim.trash.base import TrashEntry, TrashStore, TrashStoreError
from reclaim.utils.formatting import OutputMode, console, print_warning
from reclaim.utils.fs import get_size

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[RestoreProgress], None]
TrashIndex = dict[str, TrashEntry]


class RestoreError(Exception):
    """Base exception for restore failures."""


class NothingToRestoreError(RestoreError):
    """Raised when there is no deletion history to restore from."""


class DestinationExistsError(RestoreError):
    """Raised when the original location of an entry is occupied."""


class TrashEntryNotFoundError(RestoreError):
    """Raised when a path matches no trash entry, neither exactly nor as a directory."""


class RestoreEngine:
    """Reconciles deletion history with the trash store.

    The engine holds no state between calls besides its collaborators;
    several engines may be used side by side.

    Args:
        trash: Trash store capability to enumerate and restore from.
        history: Deletion history used by restore_last(). Defaults to the
            user's history store.
        normalizer: Path normalization. Defaults to the current platform's.
        output_mode: How much to print while restoring.
        activity: Optional activity log receiving one line per attempt.
        dry_run: Check every match without moving anything.
    """

    def __init__(
        self,
        trash: TrashStore,
        history: HistoryStore | None = None,
        *,
        normalizer: PathNormalizer | None = None,
        output_mode: OutputMode = OutputMode.NORMAL,
        activity: ActivityLog | None = None,
        dry_run: bool = False,
    ) -> None:
        self._trash = trash
        self._history = history if history is not None else HistoryStore()
        self._normalizer = normalizer if normalizer is not None else PathNormalizer()
        self._output_mode = output_mode
        self._activity = activity
        self._dry_run = dry_run

    # =========================================================================
    # Entry points
    # =========================================================================

    def get_restore_count(self) -> int:
        """Count restorable records of the most recent deletion session.

        Returns:
            Number of records that were moved to the trash successfully,
            0 if there is no deletion history.

        Raises:
            HistoryError: If the history cannot be read.
        """
        log = self._history.latest_log()
        if log is None:
            return 0
        return log.restorable_count

    def restore_last(self, progress: ProgressCallback | None = None) -> RestoreResult:
        """Restore every item of the most recent deletion session.

        Args:
            progress: Optional observer, see restore_records().

        Returns:
            Aggregated RestoreResult.

        Raises:
            NothingToRestoreError: If the history is empty.
            HistoryError: If the history cannot be read.
            TrashStoreError: If the trash store cannot be enumerated.
        """
        log = self._history.latest_log()
        if log is None:
            raise NothingToRestoreError("No deletion history found. Nothing to restore.")
        return self.restore_log(log, progress)

    def restore_log(
        self, log: DeletionLog, progress: ProgressCallback | None = None
    ) -> RestoreResult:
        """Restore every item of a specific deletion session.

        Args:
            log: The session to replay.
            progress: Optional observer, see restore_records().

        Returns:
            Aggregated RestoreResult.

        Raises:
            TrashStoreError: If the trash store cannot be enumerated.
        """
        logger.info("Restoring deletion log %s (%d records)", log.id, len(log.records))
        return self.restore_records(log.records, progress)

    def restore_records(
        self,
        records: Sequence[DeletionRecord],
        progress: ProgressCallback | None = None,
    ) -> RestoreResult:
        """Reconcile records against the current trash contents.

        Records that failed or were deleted permanently are skipped
        entirely. The remaining records are processed in order; before each
        one, and once more after the last, ``progress`` receives a
        RestoreProgress snapshot. An exception raised by ``progress``
        cancels the remaining batch and propagates; items restored so far
        stay restored.

        Args:
            records: Records in their original deletion order.
            progress: Optional observer.

        Returns:
            Aggregated RestoreResult.

        Raises:
            TrashStoreError: If the trash store cannot be enumerated.
        """
        restorable = [r for r in records if r.is_restorable]
        total = len(restorable)
        index = self._build_index(self._trash.list())

        result = RestoreResult()
        for record in restorable:
            if progress is not None:
                progress(RestoreProgress.from_result(record.path, result, total))
            result = self._restore_record(record, index, result)

        if progress is not None:
            progress(RestoreProgress.from_result(None, result, total))

        logger.info("Restore finished: %s", result.summary())
        return result

    def restore_path(self, path: str | Path) -> RestoreResult:
        """Restore one path without consulting the deletion history.

        The path may name a trashed file or a directory whose contents are
        held by the trash as separate entries. Restored sizes are measured
        on disk after the move, or in the trash store during a dry run.

        Args:
            path: Original location of the item.

        Returns:
            RestoreResult with restored == 1 on success. For a directory,
            ``errors`` counts children that could not be restored.

        Raises:
            TrashEntryNotFoundError: If nothing in the trash matches the path.
            RestoreError: If an exactly matching entry cannot be restored.
            TrashStoreError: If the trash store cannot be enumerated.
        """
        target = str(path)
        index = self._build_index(self._trash.list())
        key = self._normalizer.normalize(target)

        entry = index.get(key)
        if entry is not None:
            try:
                self.restore_entry(entry)
            except (RestoreError, TrashStoreError, OSError) as e:
                self._log_activity(f"Restore failed {target}: {e}")
                raise RestoreError(f"Failed to restore {target}: {e}") from e
            self._report_restored(target)
            return RestoreResult().add_restored(self._entry_size(entry))

        children = self._find_children(index, key)
        if not children:
            raise TrashEntryNotFoundError(f"File or directory not found in trash: {target}")

        restored_count = 0
        restored_bytes = 0
        failures = 0
        for child in children:
            if self._try_restore_entry(child):
                restored_count += 1
                restored_bytes += self._entry_size(child)
            else:
                failures += 1

        result = RestoreResult(errors=failures)
        if restored_count:
            result = RestoreResult(restored=1, restored_bytes=restored_bytes, errors=failures)
            self._report_restored(target, children=restored_count)
        return result

    def restore_entry(self, entry: TrashEntry) -> None:
        """Move one trash entry back, refusing to overwrite anything.

        Missing parent directories of the destination are created.

        Args:
            entry: Entry from the current trash listing.

        Raises:
            DestinationExistsError: If the destination is occupied.
            RestoreError: If the parent directory cannot be created.
            TrashStoreError: If the trash store fails to move the entry.
        """
        destination = Path(entry.original_path)

        if destination.exists() or destination.is_symlink():
            raise DestinationExistsError(f"Destination already exists: {destination}")

        if self._dry_run:
            logger.info("Dry-run: would restore %s", destination)
            return

        parent = destination.parent
        if not parent.exists():
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise RestoreError(f"Failed to create parent directory {parent}: {e}") from e

        self._trash.restore(entry)

    # =========================================================================
    # Reconciliation
    # =========================================================================

    def _build_index(self, entries: Iterable[TrashEntry]) -> TrashIndex:
        """Index entries by normalized original path.

        When several entries share a path, the most recently deleted one
        wins (entries without a deletion date lose to dated ones).
        """
        index: TrashIndex = {}
        for entry in entries:
            key = self._normalizer.normalize(entry.original_path)
            current = index.get(key)
            if current is None or (entry.deleted_at or "") >= (current.deleted_at or ""):
                index[key] = entry
        logger.debug("Indexed %d trash entries", len(index))
        return index

    def _find_children(self, index: TrashIndex, key: str) -> list[TrashEntry]:
        """Entries located below the directory ``key``, in listing order."""
        prefix = self._normalizer.as_prefix(key)
        return [
            entry
            for entry_key, entry in index.items()
            if self._normalizer.is_descendant(entry_key, prefix)
        ]

    def _restore_record(
        self,
        record: DeletionRecord,
        index: TrashIndex,
        result: RestoreResult,
    ) -> RestoreResult:
        """Fold one record into the running result."""
        key = self._normalizer.normalize(record.path)

        entry = index.get(key)
        if entry is not None:
            if self._try_restore_entry(entry, record.path):
                outcome = RestoreOutcome.RESTORED
            else:
                outcome = RestoreOutcome.FAILED
            return self._apply(result, outcome, record)

        children = self._find_children(index, key)
        if not children:
            self._report_not_found(record.path)
            return self._apply(result, RestoreOutcome.NOT_FOUND, record)

        restored_children = 0
        failed_children = 0
        for child in children:
            if self._try_restore_entry(child):
                restored_children += 1
            else:
                failed_children += 1

        if restored_children:
            self._report_restored(record.path, children=restored_children)
            result = result.add_restored(record.size_bytes)
        return result.add_errors(failed_children) if failed_children else result

    @staticmethod
    def _apply(
        result: RestoreResult, outcome: RestoreOutcome, record: DeletionRecord
    ) -> RestoreResult:
        """Add a single-entry outcome to the running result."""
        if outcome is RestoreOutcome.RESTORED:
            return result.add_restored(record.size_bytes)
        if outcome is RestoreOutcome.FAILED:
            return result.add_errors()
        return result.add_not_found()

    def _try_restore_entry(self, entry: TrashEntry, display_path: str | None = None) -> bool:
        """Restore an entry, reporting instead of raising per-entry failures.

        Args:
            entry: Entry to restore.
            display_path: Path to report on success. Directory children are
                not reported individually, so pass None for them.

        Returns:
            True if the entry was restored.
        """
        try:
            self.restore_entry(entry)
        except (RestoreError, TrashStoreError, OSError) as e:
            self._report_failure(entry.original_path, e)
            return False

        self._log_activity(f"Restored {entry.original_path}")
        if display_path is not None:
            self._report_restored(display_path)
        return True

    # =========================================================================
    # Reporting
    # =========================================================================

    def _entry_size(self, entry: TrashEntry) -> int:
        """Size of a restored entry, 0 if it cannot be measured.

        A dry run never moves the entry, so it is measured in the trash.
        """
        if self._dry_run:
            return self._trash.size_of(entry) or 0
        return get_size(Path(entry.original_path)) or 0

    def _report_restored(self, path: str, children: int | None = None) -> None:
        if self._output_mode is OutputMode.QUIET:
            return
        verb = "Would restore" if self._dry_run else "Restored"
        if children is None:
            console.print(f"[success]✓[/] {verb}: [muted]{escape(path)}[/]")
        else:
            console.print(
                f"[success]✓[/] {verb} directory: [muted]{escape(path)}[/] ({children} items)"
            )

    def _report_failure(self, path: str, error: Exception) -> None:
        logger.info("Failed to restore %s: %s", path, error)
        self._log_activity(f"Restore failed {path}: {error}")
        if self._output_mode is not OutputMode.QUIET:
            print_warning(f"Failed to restore {escape(path)}: {escape(str(error))}")

    def _report_not_found(self, path: str) -> None:
        logger.debug("Not found in trash: %s", path)
        self._log_activity(f"Not found in trash {path}")
        if self._output_mode is OutputMode.VERBOSE:
            console.print(f"[not_found]?[/] Not found in trash: [muted]{escape(path)}[/]")

    def _log_activity(self, message: str) -> None:
        if self._activity is not None and not self._dry_run:
            self._activity.write(message)
