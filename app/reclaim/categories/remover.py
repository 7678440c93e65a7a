"""Path removal for the clean operation.

Moves paths to the trash with send2trash, or deletes them permanently,
with dry-run support. Failures are isolated per path.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from send2trash import send2trash

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Result of a single removal.

    Attributes:
        path: Absolute path that was operated on.
        success: Whether the removal completed successfully.
        permanent: Whether the path was erased rather than trashed.
        error: Error message if the removal failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing was removed).
    """

    path: str
    success: bool
    permanent: bool = False
    error: str | None = None
    dry_run: bool = False


class Remover:
    """Removes paths by trashing or erasing them.

    Attributes:
        permanent: Erase instead of moving to the trash.
        dry_run: Report what would be removed without removing.
    """

    def __init__(self, *, permanent: bool = False, dry_run: bool = False) -> None:
        self.permanent = permanent
        self.dry_run = dry_run

    def remove(self, path: str) -> RemovalResult:
        """Remove one path.

        Args:
            path: Absolute path to remove.

        Returns:
            RemovalResult indicating success or failure.
        """
        target = Path(path)
        if not target.exists() and not target.is_symlink():
            return self._failure(path, f"Path does not exist: {path}")

        if self.dry_run:
            logger.info("Dry-run: would remove %s", path)
            return RemovalResult(path=path, success=True, permanent=self.permanent, dry_run=True)

        try:
            if self.permanent:
                self._erase(target)
            else:
                send2trash(path)
        except OSError as e:
            return self._failure(path, str(e))

        logger.debug("Removed %s (permanent=%s)", path, self.permanent)
        return RemovalResult(path=path, success=True, permanent=self.permanent)

    @staticmethod
    def _erase(target: Path) -> None:
        """Delete a file, symlink or directory tree."""
        # Directories (but not symlinks to directories)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()

    def _failure(self, path: str, error: str) -> RemovalResult:
        logger.info("Failed to remove %s: %s", path, error)
        return RemovalResult(path=path, success=False, permanent=self.permanent, error=error)
