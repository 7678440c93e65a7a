"""Plain-text activity log.

Appends one timestamped line per deletion and restore attempt to
~/.local/state/reclaim/logs/cleaning.log so that a user can audit what
reclaim touched without parsing the JSONL history.
"""

import logging
from datetime import datetime
from pathlib import Path

from reclaim.core.paths import ensure_log_dir, get_log_dir

logger = logging.getLogger(__name__)

ACTIVITY_LOG_FILENAME = "cleaning.log"


class ActivityLog:
    """Append-only text log of cleaning and restore activity.

    Writing is best effort: the first failure to open the log file is
    reported through the module logger and further writes are skipped.

    Attributes:
        path: File the activity lines are appended to.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize ActivityLog.

        Args:
            path: Optional override for the log file.
                  Default: ~/.local/state/reclaim/logs/cleaning.log
        """
        self._custom_path = path is not None
        self.path = path if path is not None else get_log_dir() / ACTIVITY_LOG_FILENAME
        self._disabled = False

    def write(self, message: str) -> None:
        """Append a timestamped line.

        Args:
            message: Single-line message to record.
        """
        if self._disabled:
            return

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            if self._custom_path:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            else:
                ensure_log_dir()
            with self.path.open(mode="a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {message}\n")
        except (OSError, RuntimeError) as e:
            logger.warning("Activity log disabled, cannot write %s: %s", self.path, e)
            self._disabled = True
