"""Display helpers shared by CLI commands."""

import json
from datetime import datetime

from rich.markup import escape

from reclaim.models.scan_result import ScanResults
from reclaim.utils.formatting import console, create_category_table, format_size


def format_timestamp(value: str) -> str:
    """Render an ISO 8601 timestamp in local time, or as-is if unparsable."""
    try:
        return datetime.fromisoformat(value).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return value


def print_scan_table(results: ScanResults, title: str = "Reclaimable Space") -> None:
    """Print per-category item counts and sizes with a total row.

    Args:
        results: Scan output to display.
        title: Table title.
    """
    table = create_category_table(title)
    for category, scan in results.categories.items():
        table.add_row(
            f"[category]{category.value.capitalize()}[/]",
            str(scan.items),
            format_size(scan.size_bytes),
        )
    table.add_section()
    table.add_row(
        "[bold]Total[/]",
        f"[bold]{results.total_items}[/]",
        f"[bold]{format_size(results.total_bytes)}[/]",
    )
    console.print(table)


def print_scan_json(results: ScanResults) -> None:
    """Print scan results as JSON on stdout."""
    console.print_json(json.dumps(results.to_dict()))


def print_scan_paths(results: ScanResults, limit: int = 10) -> None:
    """List the first paths of every category (verbose output)."""
    for category, scan in results.categories.items():
        if not scan.paths:
            continue
        console.print(f"\n[header]{category.value.capitalize()}[/]")
        for path in scan.paths[:limit]:
            console.print(f"  [muted]{escape(path)}[/] [size]{format_size(scan.size_of(path))}[/]")
        if scan.items > limit:
            console.print(f"  [muted]... and {scan.items - limit} more[/]")
