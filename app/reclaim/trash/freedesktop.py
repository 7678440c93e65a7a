"""FreeDesktop.org trash store.

Implements the TrashStore capability on top of the FreeDesktop.org Trash
specification used by GNOME, KDE, COSMIC and send2trash on Linux:

    $XDG_DATA_HOME/Trash/files/<name>            the trashed item
    $XDG_DATA_HOME/Trash/info/<name>.trashinfo   its original location

Additional per-volume trash directories ($topdir/.Trash-$uid) can be
passed explicitly; their relative ``Path=`` values are resolved against
the volume's top directory.
"""

from __future__ import annotations

import configparser
import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

from reclaim.core.paths import get_home_trash_dir
from reclaim.trash.base import TrashEntry, TrashStore, TrashStoreError
from reclaim.utils.fs import get_size

logger = logging.getLogger(__name__)

INFO_SUFFIX = ".trashinfo"
_INFO_SECTION = "Trash Info"


@dataclass(frozen=True, slots=True)
class TrashLocation:
    """On-disk location of one trashed item.

    Attributes:
        data_path: The trashed file or directory under ``files/``.
        info_path: Its ``.trashinfo`` file under ``info/``.
    """

    data_path: Path
    info_path: Path


def _top_dir(trash_dir: Path) -> Path:
    """Top directory relative ``Path=`` values are resolved against."""
    # $topdir/.Trash/$uid
    if trash_dir.parent.name == ".Trash":
        return trash_dir.parent.parent
    # $topdir/.Trash-$uid, and the home trash
    return trash_dir.parent


def parse_trashinfo(text: str) -> tuple[str, str | None]:
    """Parse the content of a .trashinfo file.

    Args:
        text: File content.

    Returns:
        Tuple of (percent-decoded Path value, DeletionDate or None).

    Raises:
        ValueError: If the content has no [Trash Info] section or no Path key.
    """
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        parser.read_string(text)
    except configparser.Error as e:
        raise ValueError(f"Invalid trashinfo: {e}") from e

    if not parser.has_section(_INFO_SECTION):
        msg = "Missing [Trash Info] section"
        raise ValueError(msg)
    raw_path = parser.get(_INFO_SECTION, "Path", fallback="").strip()
    if not raw_path:
        msg = "Missing Path entry"
        raise ValueError(msg)

    deleted_at = parser.get(_INFO_SECTION, "DeletionDate", fallback=None)
    return unquote(raw_path), deleted_at.strip() if deleted_at else None


class FreeDesktopTrash(TrashStore):
    """Trash store backed by FreeDesktop.org trash directories.

    Args:
        trash_dirs: Trash directories to enumerate. Defaults to the user's
            home trash (~/.local/share/Trash).
    """

    def __init__(self, trash_dirs: Sequence[Path] | None = None) -> None:
        self._trash_dirs: tuple[Path, ...] = (
            tuple(trash_dirs) if trash_dirs is not None else (get_home_trash_dir(),)
        )

    @property
    def trash_dirs(self) -> tuple[Path, ...]:
        """Trash directories this store enumerates."""
        return self._trash_dirs

    def is_available(self) -> bool:
        """Available when at least one trash directory exists."""
        return any(d.is_dir() for d in self._trash_dirs)

    def list(self) -> list[TrashEntry]:
        """Enumerate entries of every configured trash directory.

        Info files that cannot be parsed, or whose data file is missing,
        are skipped with a warning.

        Returns:
            Entries ordered by trash directory, then by trashed name.

        Raises:
            TrashStoreError: If an info directory exists but cannot be read.
        """
        entries: list[TrashEntry] = []
        for trash_dir in self._trash_dirs:
            entries.extend(self._list_dir(trash_dir))
        return entries

    def restore(self, entry: TrashEntry) -> None:
        """Move a trashed item back to its original location.

        Args:
            entry: Entry produced by list().

        Raises:
            TrashStoreError: If the entry was not produced by this store or
                the move fails.
        """
        location = self.location(entry)
        destination = Path(entry.original_path)

        if not location.data_path.exists() and not location.data_path.is_symlink():
            raise TrashStoreError(f"Trashed item vanished: {location.data_path}")

        try:
            shutil.move(str(location.data_path), str(destination))
        except OSError as e:
            raise TrashStoreError(f"Cannot move {location.data_path} to {destination}: {e}") from e

        try:
            location.info_path.unlink()
        except OSError as e:
            logger.warning(
                "Restored %s but could not remove %s: %s", destination, location.info_path, e
            )

    def size_of(self, entry: TrashEntry) -> int | None:
        """Measure the trashed item under ``files/``.

        Raises:
            TrashStoreError: If the entry was produced by another store.
        """
        return get_size(self.location(entry).data_path)

    def purge_path(self, data_path: Path) -> None:
        """Permanently erase a trashed item given its path under ``files/``.

        Args:
            data_path: Location of the item inside one of this store's
                trash directories.

        Raises:
            TrashStoreError: If the path is not inside this store or the
                item cannot be erased.
        """
        trash_dir = data_path.parent.parent
        if data_path.parent.name != "files" or trash_dir not in self._trash_dirs:
            raise TrashStoreError(f"Not an item of this trash store: {data_path}")
        info_path = trash_dir / "info" / f"{data_path.name}{INFO_SUFFIX}"
        self._erase(TrashLocation(data_path=data_path, info_path=info_path))

    @staticmethod
    def _erase(location: TrashLocation) -> None:
        """Delete an item's data and info files."""
        data_path = location.data_path
        try:
            if data_path.is_dir() and not data_path.is_symlink():
                shutil.rmtree(data_path)
            elif data_path.exists() or data_path.is_symlink():
                data_path.unlink()
            location.info_path.unlink(missing_ok=True)
        except OSError as e:
            raise TrashStoreError(f"Cannot erase {data_path}: {e}") from e

    def _list_dir(self, trash_dir: Path) -> list[TrashEntry]:
        """Enumerate one trash directory."""
        info_dir = trash_dir / "info"
        files_dir = trash_dir / "files"

        try:
            if not info_dir.is_dir():
                return []
            info_files = sorted(p for p in info_dir.iterdir() if p.name.endswith(INFO_SUFFIX))
        except OSError as e:
            raise TrashStoreError(f"Cannot enumerate trash directory {trash_dir}: {e}") from e

        top_dir = _top_dir(trash_dir)
        entries: list[TrashEntry] = []
        for info_path in info_files:
            trashed_name = info_path.name[: -len(INFO_SUFFIX)]
            data_path = files_dir / trashed_name

            if not data_path.exists() and not data_path.is_symlink():
                logger.debug("Skipping trashinfo without data file: %s", info_path)
                continue

            try:
                raw_path, deleted_at = parse_trashinfo(info_path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.warning("Skipping unreadable trashinfo %s: %s", info_path, e)
                continue

            original = Path(raw_path)
            if not original.is_absolute():
                original = top_dir / original

            entries.append(
                TrashEntry(
                    original_parent=str(original.parent),
                    name=original.name,
                    deleted_at=deleted_at,
                    handle=TrashLocation(data_path=data_path, info_path=info_path),
                )
            )
        return entries

    @staticmethod
    def location(entry: TrashEntry) -> TrashLocation:
        """On-disk location of an entry produced by list().

        Raises:
            TrashStoreError: If the entry was produced by another store.
        """
        if not isinstance(entry.handle, TrashLocation):
            msg = f"Entry was not produced by this trash store: {entry.original_path}"
            raise TrashStoreError(msg)
        return entry.handle
