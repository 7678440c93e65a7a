"""Unit tests for the restore engine.

Tests reconciliation of deletion records against an in-memory trash
store: exact matches, directory reconstruction, collision handling,
progress notifications and the single-path entry point.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from reclaim.core.activity import ActivityLog
from reclaim.core.history import HistoryStore
from reclaim.core.normalize import PathNormalizer
from reclaim.core.restore import (
    DestinationExistsError,
    NothingToRestoreError,
    RestoreEngine,
    RestoreError,
    TrashEntryNotFoundError,
)
from reclaim.models.history import DeletionLog, DeletionRecord
from reclaim.models.restore import RestoreProgress, RestoreResult
from reclaim.trash.base import TrashEntry, TrashStoreError
from reclaim.trash.memory import MemoryTrash
from reclaim.utils.formatting import OutputMode


def _entry(path: Path | str, deleted_at: str | None = None) -> TrashEntry:
    """Trash entry reconstructing to ``path``."""
    p = Path(path)
    return TrashEntry(original_parent=str(p.parent), name=p.name, deleted_at=deleted_at)


def _engine(
    trash: MemoryTrash,
    history: HistoryStore | None = None,
    **kwargs: object,
) -> RestoreEngine:
    kwargs.setdefault("output_mode", OutputMode.QUIET)
    kwargs.setdefault("normalizer", PathNormalizer(case_insensitive=False))
    return RestoreEngine(trash, history, **kwargs)  # type: ignore[arg-type]


class TestRestoreRecords:
    """Tests for RestoreEngine.restore_records."""

    def test_scenario_single_restorable_record(
        self, tmp_path: Path, mixed_records: list[DeletionRecord]
    ) -> None:
        """Only the restorable record is restored; the others are not counted."""
        trash = MemoryTrash([_entry(tmp_path / "a.txt")], materialize=True)

        result = _engine(trash).restore_records(mixed_records)

        assert result == RestoreResult(restored=1, restored_bytes=100, errors=0, not_found=0)
        assert (tmp_path / "a.txt").exists()

    def test_scenario_empty_trash(
        self, tmp_path: Path, mixed_records: list[DeletionRecord]
    ) -> None:
        """Non-restorable records are excluded, not counted as not found."""
        result = _engine(MemoryTrash()).restore_records(mixed_records)

        assert result == RestoreResult(restored=0, restored_bytes=0, errors=0, not_found=1)

    def test_non_restorable_records_never_touch_trash(self, tmp_path: Path) -> None:
        """Failed and permanent records are skipped even if the trash holds them."""
        failed = tmp_path / "failed.txt"
        permanent = tmp_path / "permanent.txt"
        trash = MemoryTrash([_entry(failed), _entry(permanent)], materialize=True)
        records = [
            DeletionRecord(path=str(failed), success=False),
            DeletionRecord(path=str(permanent), success=True, permanent=True),
        ]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult()
        assert trash.restored == []
        assert not failed.exists()
        assert not permanent.exists()

    def test_exact_match_fails_when_destination_exists(self, tmp_path: Path) -> None:
        """An occupied destination counts as an error and is not overwritten."""
        target = tmp_path / "a.txt"
        target.write_text("newer content")
        trash = MemoryTrash([_entry(target)], materialize=True)
        records = [DeletionRecord(path=str(target), success=True, size_bytes=10)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(errors=1)
        assert target.read_text() == "newer content"
        assert trash.restored == []

    def test_trash_failure_counts_as_error_and_continues(self, tmp_path: Path) -> None:
        """A failing trash restore does not abort the batch."""
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"
        trash = MemoryTrash(
            [_entry(first), _entry(second)],
            materialize=True,
            fail_on=lambda e: e.name == "first.txt",
        )
        records = [
            DeletionRecord(path=str(first), success=True, size_bytes=1),
            DeletionRecord(path=str(second), success=True, size_bytes=2),
        ]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(restored=1, restored_bytes=2, errors=1)
        assert second.exists()

    def test_creates_missing_parent_directories(self, tmp_path: Path) -> None:
        """Missing parents of the destination are created on demand."""
        target = tmp_path / "deep" / "nested" / "file.txt"
        trash = MemoryTrash([_entry(target)])
        records = [DeletionRecord(path=str(target), success=True, size_bytes=5)]

        result = _engine(trash).restore_records(records)

        assert result.restored == 1
        assert target.parent.is_dir()

    def test_directory_fallback_counts_record_once(self, tmp_path: Path) -> None:
        """Children of a deleted directory restore as one record with its logged size."""
        directory = tmp_path / "a" / "b"
        trash = MemoryTrash(
            [_entry(directory / "x"), _entry(directory / "y")], materialize=True
        )
        records = [DeletionRecord(path=str(directory), success=True, size_bytes=4096)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(restored=1, restored_bytes=4096)
        assert (directory / "x").exists()
        assert (directory / "y").exists()

    def test_directory_fallback_ignores_sibling_with_shared_prefix(self, tmp_path: Path) -> None:
        """A record for /a/b must not match an entry under /a/bc."""
        trash = MemoryTrash([_entry(tmp_path / "a" / "bc" / "d")], materialize=True)
        records = [DeletionRecord(path=str(tmp_path / "a" / "b"), success=True, size_bytes=1)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(not_found=1)
        assert trash.restored == []

    def test_directory_fallback_with_trailing_separator(self, tmp_path: Path) -> None:
        """A recorded directory path ending in a separator still matches its children."""
        directory = tmp_path / "build"
        trash = MemoryTrash([_entry(directory / "out.o")], materialize=True)
        records = [DeletionRecord(path=f"{directory}/", success=True, size_bytes=8)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(restored=1, restored_bytes=8)

    def test_directory_fallback_partial_failure(self, tmp_path: Path) -> None:
        """Each failed child counts as an error; surviving children still restore."""
        directory = tmp_path / "dir"
        directory.mkdir()
        (directory / "x").write_text("occupied")
        trash = MemoryTrash(
            [_entry(directory / "x"), _entry(directory / "y"), _entry(directory / "z")],
            materialize=True,
        )
        records = [DeletionRecord(path=str(directory), success=True, size_bytes=300)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(restored=1, restored_bytes=300, errors=1)

    def test_directory_fallback_all_children_fail(self, tmp_path: Path) -> None:
        """A directory with no restorable child is not counted as restored."""
        directory = tmp_path / "dir"
        trash = MemoryTrash(
            [_entry(directory / "x"), _entry(directory / "y")],
            fail_on=lambda e: True,
        )
        records = [DeletionRecord(path=str(directory), success=True, size_bytes=300)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(errors=2)

    def test_case_insensitive_match(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        windows_normalizer: PathNormalizer,
    ) -> None:
        """A Windows-style record matches a lower-cased, slash-separated entry."""
        monkeypatch.chdir(tmp_path)
        trash = MemoryTrash([TrashEntry(original_parent="c:/users/x", name="file.txt")])
        records = [DeletionRecord(path="C:\\Users\\X\\File.txt", success=True, size_bytes=42)]

        result = _engine(trash, normalizer=windows_normalizer).restore_records(records)

        assert result == RestoreResult(restored=1, restored_bytes=42)

    def test_case_sensitive_platform_does_not_fold_case(self, tmp_path: Path) -> None:
        """With identity normalization, differently cased paths do not match."""
        trash = MemoryTrash([_entry(tmp_path / "file.txt")], materialize=True)
        records = [DeletionRecord(path=str(tmp_path / "File.txt"), success=True)]

        result = _engine(trash).restore_records(records)

        assert result == RestoreResult(not_found=1)

    def test_bucket_sum_equals_restorable_records(self, tmp_path: Path) -> None:
        """restored + errors + not_found equals the number of restorable records."""
        occupied = tmp_path / "occupied.txt"
        occupied.write_text("x")
        trash = MemoryTrash(
            [_entry(tmp_path / "ok.txt"), _entry(occupied), _entry(tmp_path / "d" / "child")],
            materialize=True,
        )
        records = [
            DeletionRecord(path=str(tmp_path / "ok.txt"), success=True, size_bytes=1),
            DeletionRecord(path=str(occupied), success=True, size_bytes=2),
            DeletionRecord(path=str(tmp_path / "gone.txt"), success=True, size_bytes=3),
            DeletionRecord(path=str(tmp_path / "d"), success=True, size_bytes=4),
            DeletionRecord(path=str(tmp_path / "failed.txt"), success=False),
        ]

        result = _engine(trash).restore_records(records)

        assert result.processed == 4
        assert result == RestoreResult(restored=2, restored_bytes=5, errors=1, not_found=1)

    def test_trash_listed_once_per_call(self, tmp_path: Path) -> None:
        """The trash index is built from a single enumeration per call."""
        trash = MemoryTrash([_entry(tmp_path / "a"), _entry(tmp_path / "b")], materialize=True)
        records = [
            DeletionRecord(path=str(tmp_path / "a"), success=True),
            DeletionRecord(path=str(tmp_path / "b"), success=True),
        ]
        engine = _engine(trash)

        engine.restore_records(records)
        engine.restore_records(records)

        assert trash.list_calls == 2

    @pytest.mark.parametrize("newest_first", [True, False])
    def test_duplicate_entries_prefer_latest_deletion(
        self, tmp_path: Path, newest_first: bool
    ) -> None:
        """When two entries share a path, the most recently deleted one is restored."""
        older = _entry(tmp_path / "a.txt", deleted_at="2026-01-01T10:00:00")
        newer = _entry(tmp_path / "a.txt", deleted_at="2026-01-02T10:00:00")
        trash = MemoryTrash([newer, older] if newest_first else [older, newer])
        records = [DeletionRecord(path=str(tmp_path / "a.txt"), success=True)]

        _engine(trash).restore_records(records)

        assert [e.deleted_at for e in trash.restored] == ["2026-01-02T10:00:00"]

    def test_enumeration_failure_aborts(self, tmp_path: Path) -> None:
        """A trash store that cannot be listed fails the whole call."""
        trash = MagicMock()
        trash.list.side_effect = TrashStoreError("Cannot enumerate")
        records = [DeletionRecord(path=str(tmp_path / "a"), success=True)]

        with pytest.raises(TrashStoreError, match="Cannot enumerate"):
            RestoreEngine(trash, output_mode=OutputMode.QUIET).restore_records(records)

    def test_empty_records(self) -> None:
        """No records produce an empty result."""
        assert _engine(MemoryTrash()).restore_records([]) == RestoreResult()


class TestProgress:
    """Tests for progress notifications."""

    def test_called_before_each_record_and_at_end(self, tmp_path: Path) -> None:
        """One notification per restorable record plus a terminal one."""
        trash = MemoryTrash([_entry(tmp_path / "a")], materialize=True)
        records = [
            DeletionRecord(path=str(tmp_path / "a"), success=True, size_bytes=1),
            DeletionRecord(path=str(tmp_path / "skip"), success=False),
            DeletionRecord(path=str(tmp_path / "missing"), success=True),
        ]
        seen: list[RestoreProgress] = []

        _engine(trash).restore_records(records, seen.append)

        assert [p.path for p in seen] == [str(tmp_path / "a"), str(tmp_path / "missing"), None]
        assert all(p.total == 2 for p in seen)
        assert (seen[0].restored, seen[0].not_found) == (0, 0)
        assert (seen[1].restored, seen[1].not_found) == (1, 0)
        assert seen[2].done
        assert (seen[2].restored, seen[2].errors, seen[2].not_found) == (1, 0, 1)

    def test_callback_failure_aborts_without_rollback(self, tmp_path: Path) -> None:
        """An exception from the callback stops the batch; restored items stay."""
        trash = MemoryTrash([_entry(tmp_path / "a"), _entry(tmp_path / "b")], materialize=True)
        records = [
            DeletionRecord(path=str(tmp_path / "a"), success=True),
            DeletionRecord(path=str(tmp_path / "b"), success=True),
        ]

        def cancel_on_second(progress: RestoreProgress) -> None:
            if progress.path == str(tmp_path / "b"):
                raise RuntimeError("cancelled")

        with pytest.raises(RuntimeError, match="cancelled"):
            _engine(trash).restore_records(records, cancel_on_second)

        assert (tmp_path / "a").exists()
        assert not (tmp_path / "b").exists()

    def test_terminal_notification_without_records(self) -> None:
        """An empty batch still reports completion."""
        callback = MagicMock()

        _engine(MemoryTrash()).restore_records([], callback)

        callback.assert_called_once()
        progress = callback.call_args.args[0]
        assert progress.done
        assert progress.total == 0


class TestRestoreLast:
    """Tests for restore_last and get_restore_count."""

    def test_empty_history_raises(self, history_store: HistoryStore) -> None:
        """restore_last on an empty store fails with a descriptive error."""
        with pytest.raises(NothingToRestoreError, match="Nothing to restore"):
            _engine(MemoryTrash(), history_store).restore_last()

    def test_restores_newest_session(self, tmp_path: Path, history_store: HistoryStore) -> None:
        """Only the newest session is replayed."""
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        history_store.record_session(
            [DeletionRecord(path=str(old), success=True, size_bytes=1)],
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
        )
        history_store.record_session(
            [DeletionRecord(path=str(new), success=True, size_bytes=2)],
            created_at=datetime(2026, 1, 2, tzinfo=UTC),
        )
        trash = MemoryTrash([_entry(old), _entry(new)], materialize=True)

        result = _engine(trash, history_store).restore_last()

        assert result == RestoreResult(restored=1, restored_bytes=2)
        assert new.exists()
        assert not old.exists()

    def test_restore_count_without_history(self, history_store: HistoryStore) -> None:
        """get_restore_count is 0 when nothing was recorded."""
        assert _engine(MemoryTrash(), history_store).get_restore_count() == 0

    def test_restore_count_of_latest_session(
        self, history_store: HistoryStore, mixed_records: list[DeletionRecord]
    ) -> None:
        """get_restore_count counts restorable records of the newest session."""
        history_store.record_session(mixed_records)

        assert _engine(MemoryTrash(), history_store).get_restore_count() == 1

    def test_restore_log(
        self,
        tmp_path: Path,
        make_log: Callable[..., DeletionLog],
        mixed_records: list[DeletionRecord],
    ) -> None:
        """restore_log replays a specific session."""
        trash = MemoryTrash([_entry(tmp_path / "a.txt")], materialize=True)

        result = _engine(trash).restore_log(make_log(mixed_records))

        assert result.summary() == "Restored 1 items (100 B), 0 errors, 0 not found"


class TestRestorePath:
    """Tests for RestoreEngine.restore_path."""

    def test_exact_match_uses_disk_size(self, tmp_path: Path) -> None:
        """Restored bytes are measured on disk after the move."""
        target = tmp_path / "a.txt"
        trash = MemoryTrash([_entry(target)], materialize=True)

        result = _engine(trash).restore_path(target)

        assert result == RestoreResult(restored=1, restored_bytes=0)
        assert target.exists()

    def test_directory_children_sizes_summed(self, tmp_path: Path) -> None:
        """A directory restore sums the on-disk size of restored children."""
        directory = tmp_path / "proj" / "node_modules"
        trash = MemoryTrash([_entry(directory / "a"), _entry(directory / "b")], materialize=True)

        result = _engine(trash).restore_path(str(directory))

        assert result.restored == 1
        assert result.errors == 0
        assert (directory / "a").exists()
        assert (directory / "b").exists()

    def test_dry_run_sizes_come_from_trash(self, tmp_path: Path) -> None:
        """A dry run reports the trashed sizes and moves nothing."""
        target = tmp_path / "a.txt"
        directory = tmp_path / "build"
        trash = MemoryTrash(
            [_entry(target), _entry(directory / "x"), _entry(directory / "y")],
            materialize=True,
            sizes={str(target): 42, str(directory / "x"): 5, str(directory / "y"): 7},
        )
        engine = _engine(trash, dry_run=True)

        assert engine.restore_path(target) == RestoreResult(restored=1, restored_bytes=42)
        assert engine.restore_path(directory) == RestoreResult(restored=1, restored_bytes=12)
        assert trash.restored == []
        assert not target.exists()

    def test_not_found_raises(self, tmp_path: Path) -> None:
        """A path matched neither exactly nor as a directory fails the call."""
        trash = MemoryTrash([_entry(tmp_path / "other")])

        with pytest.raises(TrashEntryNotFoundError, match="not found in trash"):
            _engine(trash).restore_path(tmp_path / "missing")

    def test_exact_match_collision_raises(self, tmp_path: Path) -> None:
        """An occupied destination fails the single-path restore."""
        target = tmp_path / "a.txt"
        target.write_text("x")
        trash = MemoryTrash([_entry(target)])

        with pytest.raises(RestoreError, match="Destination already exists"):
            _engine(trash).restore_path(target)


class TestRestoreEntry:
    """Tests for the destination collision policy."""

    def test_refuses_existing_destination(self, tmp_path: Path) -> None:
        """restore_entry raises DestinationExistsError for an occupied path."""
        target = tmp_path / "a.txt"
        target.write_text("x")
        entry = _entry(target)
        trash = MemoryTrash([entry])

        with pytest.raises(DestinationExistsError):
            _engine(trash).restore_entry(entry)

        assert trash.restored == []

    def test_refuses_dangling_symlink(self, tmp_path: Path) -> None:
        """A dangling symlink also occupies the destination."""
        target = tmp_path / "link"
        target.symlink_to(tmp_path / "nowhere")
        entry = _entry(target)

        with pytest.raises(DestinationExistsError):
            _engine(MemoryTrash([entry])).restore_entry(entry)

    def test_dry_run_checks_without_restoring(self, tmp_path: Path) -> None:
        """In dry-run mode nothing is created or moved."""
        target = tmp_path / "new" / "a.txt"
        entry = _entry(target)
        trash = MemoryTrash([entry], materialize=True)

        _engine(trash, dry_run=True).restore_entry(entry)

        assert trash.restored == []
        assert not target.parent.exists()


class TestReporting:
    """Tests for output modes and the activity log."""

    def test_activity_log_lines(self, tmp_path: Path) -> None:
        """Every attempt is written to the activity log."""
        activity = ActivityLog(tmp_path / "logs" / "cleaning.log")
        trash = MemoryTrash([_entry(tmp_path / "a")], materialize=True)
        records = [
            DeletionRecord(path=str(tmp_path / "a"), success=True),
            DeletionRecord(path=str(tmp_path / "b"), success=True),
        ]

        _engine(trash, activity=activity).restore_records(records)

        content = activity.path.read_text()
        assert f"Restored {tmp_path / 'a'}" in content
        assert f"Not found in trash {tmp_path / 'b'}" in content

    def test_verbose_reports_not_found(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """VERBOSE output lists records missing from the trash."""
        records = [DeletionRecord(path=str(tmp_path / "gone"), success=True)]

        _engine(MemoryTrash(), output_mode=OutputMode.VERBOSE).restore_records(records)

        assert "Not found in trash" in capsys.readouterr().out

    def test_normal_hides_not_found(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """NORMAL output does not list records missing from the trash."""
        records = [DeletionRecord(path=str(tmp_path / "gone"), success=True)]

        _engine(MemoryTrash(), output_mode=OutputMode.NORMAL).restore_records(records)

        assert "Not found in trash" not in capsys.readouterr().out
