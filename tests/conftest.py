"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch
from urllib.parse import quote

import pytest
from reclaim.core.history import HistoryStore
from reclaim.core.normalize import PathNormalizer
from reclaim.models.history import DeletionLog, DeletionRecord, create_deletion_log


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG base directory into the test's tmp_path."""
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(xdg / "state"))
    monkeypatch.setenv("XDG_DATA_HOME", str(xdg / "data"))
    return xdg


@pytest.fixture
def history_store(tmp_path: Path) -> HistoryStore:
    """History store in a temporary directory."""
    return HistoryStore(tmp_path / "history")


@pytest.fixture
def posix_normalizer() -> PathNormalizer:
    """Case-sensitive normalization (identity)."""
    return PathNormalizer(case_insensitive=False)


@pytest.fixture
def windows_normalizer() -> PathNormalizer:
    """Case-insensitive, separator-unifying normalization."""
    return PathNormalizer(case_insensitive=True)


@pytest.fixture
def make_log() -> Callable[..., DeletionLog]:
    """Factory for deletion logs with a fixed id and timestamp."""

    def _make(
        records: list[DeletionRecord],
        log_id: str = "20260117T093000000000Z-000001",
    ) -> DeletionLog:
        return create_deletion_log(
            log_id,
            records,
            metadata={"root": "/tmp"},
            created_at=datetime(2026, 1, 17, 9, 30, tzinfo=UTC),
        )

    return _make


@pytest.fixture
def mixed_records(tmp_path: Path) -> list[DeletionRecord]:
    """One restorable file record, one failed and one permanent deletion."""
    return [
        DeletionRecord(path=str(tmp_path / "a.txt"), success=True, size_bytes=100),
        DeletionRecord(path=str(tmp_path / "b.txt"), success=False, error="Permission denied"),
        DeletionRecord(path=str(tmp_path / "c.txt"), success=True, permanent=True, size_bytes=7),
    ]


@pytest.fixture
def home_trash(isolated_xdg: Path) -> Path:
    """Empty FreeDesktop.org home trash inside the isolated XDG data dir."""
    trash_dir = isolated_xdg / "data" / "Trash"
    (trash_dir / "files").mkdir(parents=True)
    (trash_dir / "info").mkdir()
    return trash_dir


@pytest.fixture
def fake_send2trash(home_trash: Path) -> Iterator[list[str]]:
    """Replace send2trash with a move into the isolated home trash.

    Yields the list of paths that were trashed.
    """
    trashed: list[str] = []

    def _send(path: str) -> None:
        source = Path(path)
        name = source.name
        counter = 1
        while (home_trash / "files" / name).exists():
            counter += 1
            name = f"{source.stem}.{counter}{source.suffix}"
        (home_trash / "info" / f"{name}.trashinfo").write_text(
            f"[Trash Info]\nPath={quote(path)}\nDeletionDate=2026-01-17T09:30:00\n"
        )
        source.rename(home_trash / "files" / name)
        trashed.append(path)

    with patch("reclaim.categories.remover.send2trash", side_effect=_send):
        yield trashed
