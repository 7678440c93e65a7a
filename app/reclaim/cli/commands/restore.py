"""Restore command implementation.

Moves items removed by `reclaim clean` back out of the trash, either a
whole session (the newest by default) or a single path.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from reclaim.cli.display import format_timestamp
from reclaim.cli.types import get_output_mode
from reclaim.core.activity import ActivityLog
from reclaim.core.history import HistoryError, HistoryStore
from reclaim.core.restore import RestoreEngine, RestoreError
from reclaim.models.history import DeletionLog
from reclaim.models.restore import RestoreProgress, RestoreResult
from reclaim.trash.base import TrashStoreError
from reclaim.trash.freedesktop import FreeDesktopTrash
from reclaim.utils.formatting import (
    OutputMode,
    console,
    format_size,
    print_error,
    print_info,
    print_success,
)


def restore(
    ctx: typer.Context,
    last: Annotated[
        bool,
        typer.Option(
            "--last",
            help="Restore the most recent clean session (default).",
        ),
    ] = False,
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Restore a single file or directory by its original path.",
        ),
    ] = None,
    log_id: Annotated[
        str | None,
        typer.Option(
            "--log",
            help="Restore a specific session (see `reclaim history`).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be restored without restoring.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Restore items from the trash.

    Examples:
        reclaim restore                     # Restore the last clean session
        reclaim restore --dry-run           # Preview only
        reclaim restore --log 20260117T093000123456Z-000042
        reclaim restore --path ~/src/app/node_modules
    """
    selected = sum((last, path is not None, log_id is not None))
    if selected > 1:
        print_error("Use only one of --last, --path and --log.")
        raise typer.Exit(code=1)

    output_mode = get_output_mode(ctx)
    engine = RestoreEngine(
        FreeDesktopTrash(),
        HistoryStore(),
        output_mode=output_mode,
        activity=ActivityLog(),
        dry_run=dry_run,
    )

    try:
        if path is not None:
            result = engine.restore_path(path.expanduser().absolute())
        else:
            log = _resolve_log(log_id)
            if log is None:
                print_info("No deletion history found. Nothing to restore.")
                return
            if not log.restorable_count:
                print_info("The selected session has nothing to restore.")
                return
            if not (dry_run or yes or _confirm(log)):
                print_info("Cancelled.")
                return
            result = _restore_with_progress(engine, log, output_mode)
    except (RestoreError, HistoryError, TrashStoreError) as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    _print_result(result, dry_run=dry_run)
    if result.has_errors:
        raise typer.Exit(code=1)


def _resolve_log(log_id: str | None) -> DeletionLog | None:
    """Load the requested session, or the newest one if no id is given."""
    store = HistoryStore()
    if log_id is None:
        return store.latest_log()
    return store.load_log(log_id)


def _confirm(log: DeletionLog) -> bool:
    """Ask before restoring a session."""
    console.print(
        f"\n[bold]Session {log.id}[/bold] ({format_timestamp(log.created_at)})"
    )
    console.print(
        f"  {log.restorable_count} restorable items ({format_size(log.restorable_bytes)})\n"
    )
    return typer.confirm(f"Restore {log.restorable_count} items?", default=False)


def _restore_with_progress(
    engine: RestoreEngine, log: DeletionLog, output_mode: OutputMode
) -> RestoreResult:
    """Run a session restore, rendering a progress bar unless quiet."""
    if output_mode is OutputMode.QUIET:
        return engine.restore_log(log)

    with Progress(
        TextColumn("[info]Restoring[/]"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("[muted]{task.description}[/]"),
        console=console,
        transient=True,
    ) as bar:
        task = bar.add_task("", total=log.restorable_count)
        started = 0

        def on_progress(progress: RestoreProgress) -> None:
            # Called before each record and once at the end
            nonlocal started
            description = "" if progress.done else escape(Path(progress.path or "").name)
            bar.update(task, completed=started, description=description)
            started += 1

        return engine.restore_log(log, on_progress)


def _print_result(result: RestoreResult, *, dry_run: bool) -> None:
    """Print the summary line of a restore."""
    summary = result.summary()
    if dry_run:
        print_info(f"Dry run: {summary}. No changes made.")
    elif result.has_errors or result.not_found:
        console.print(f"[warning]{summary}[/]")
    else:
        print_success(summary)
