"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from enum import Enum

from rich.console import Console
from rich.table import Table

from reclaim.core.theme import get_theme

_BINARY_UNITS: tuple[str, ...] = ("KiB", "MiB", "GiB", "TiB", "PiB")


class OutputMode(str, Enum):
    """How much the core prints while working.

    Attributes:
        QUIET: Print nothing; results and errors are returned to the caller.
        NORMAL: Print completed items and per-item warnings.
        VERBOSE: Additionally print items that were skipped or not found.
    """

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int | None) -> str:
    """Format a byte count using binary units.

    Args:
        size_bytes: Number of bytes. None is rendered as zero.

    Returns:
        e.g. ``"512 B"``, ``"1.0 KiB"``, ``"3.4 GiB"``.
    """
    if not size_bytes:
        return "0 B"
    if abs(size_bytes) < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    for unit in _BINARY_UNITS:
        size /= 1024
        if abs(size) < 1024 or unit == _BINARY_UNITS[-1]:
            return f"{size:.1f} {unit}"
    return f"{size:.1f} {_BINARY_UNITS[-1]}"  # pragma: no cover


def create_category_table(title: str = "Reclaimable Space") -> Table:
    """Create a pre-configured table for per-category scan output.

    Args:
        title: Table title.

    Returns:
        Rich Table with Category, Items and Size columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Category", no_wrap=True, style="text")
    table.add_column("Items", justify="right", style="muted")
    table.add_column("Size", justify="right", style="info")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
