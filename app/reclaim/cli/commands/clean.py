"""Clean command implementation.

Scans the selected categories, asks for confirmation, removes every
reported item and records the session in the deletion history.
"""

from typing import Annotated

import typer
from rich.markup import escape

from reclaim.cli.display import print_scan_table
from reclaim.cli.types import (
    NO_CATEGORY_HINT,
    AllOpt,
    BuildOpt,
    CacheOpt,
    ExcludeOpt,
    MinAgeOpt,
    PathArg,
    ProjectAgeOpt,
    TempOpt,
    TrashOpt,
    get_output_mode,
    load_effective_config,
    resolve_categories,
    resolve_root,
)
from reclaim.core.activity import ActivityLog
from reclaim.core.history import HistoryError, HistoryStore
from reclaim.core.orchestrator import clean_all, get_detectors, scan_all
from reclaim.models.scan_result import CleanReport
from reclaim.utils.formatting import (
    OutputMode,
    console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def clean(
    ctx: typer.Context,
    path: PathArg = None,
    all_: AllOpt = False,
    cache: CacheOpt = False,
    temp: TempOpt = False,
    build: BuildOpt = False,
    trash: TrashOpt = False,
    permanent: Annotated[
        bool,
        typer.Option(
            "--permanent",
            help="Delete permanently instead of moving to the trash.",
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
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be removed without removing.",
        ),
    ] = False,
    project_age: ProjectAgeOpt = None,
    min_age: MinAgeOpt = None,
    exclude: ExcludeOpt = None,
) -> None:
    """Remove reclaimable items.

    Items are moved to the trash (restorable with `reclaim restore`)
    unless --permanent is given. Trash contents are always erased.

    Examples:
        reclaim clean --cache               # Clean caches with confirmation
        reclaim clean ~/src --build -y      # No confirmation
        reclaim clean --all --dry-run       # Preview only
    """
    categories = resolve_categories(all_=all_, cache=cache, temp=temp, build=build, trash=trash)
    if not categories:
        print_info(NO_CATEGORY_HINT)
        return

    output_mode = get_output_mode(ctx)
    root = resolve_root(path)
    config = load_effective_config(project_age=project_age, min_age=min_age, exclude=exclude)
    detectors = get_detectors(categories, config)

    results = scan_all(root, detectors)
    for warning in results.warnings:
        print_warning(escape(warning))

    if results.total_items == 0:
        print_info("Nothing to clean.")
        return

    if output_mode is not OutputMode.QUIET:
        print_scan_table(results, title="Items to Remove")

    if dry_run:
        report = clean_all(
            results,
            detectors,
            authorized=True,
            permanent=permanent,
            dry_run=True,
            output_mode=output_mode,
        )
        _print_dry_run(report)
        return

    authorized = yes or typer.confirm(f"Delete {results.total_items} items?", default=False)
    if not authorized:
        print_info("Cancelled.")
        return

    report = clean_all(
        results,
        detectors,
        authorized=True,
        permanent=permanent,
        activity=ActivityLog(),
        output_mode=output_mode,
    )

    _record_history(report, root=str(root), max_sessions=config.history.max_sessions)

    if report.errors:
        console.print(f"[warning]{report.summary()}[/]")
    else:
        print_success(report.summary())
    if report.freed_bytes and output_mode is not OutputMode.QUIET:
        console.print(f"[muted]Freed {format_size(report.freed_bytes)}[/]")


def _print_dry_run(report: CleanReport) -> None:
    """Summarize what a clean run would remove."""
    erased = sum(1 for r in report.records if r.success and r.permanent)
    detail = f", {erased} permanently" if erased else ""
    print_info(
        f"Dry run: would remove {report.cleaned} items "
        f"({format_size(report.freed_bytes)}){detail}. No changes made."
    )
    if report.errors:
        print_warning(f"{report.errors} items would fail")


def _record_history(report: CleanReport, *, root: str, max_sessions: int) -> None:
    """Write the session log and apply history retention.

    A history failure is reported but does not fail the command: the
    items have already been removed.
    """
    if not report.records:
        return

    store = HistoryStore()
    try:
        log = store.record_session(
            list(report.records),
            metadata={"root": root, "cleaned": report.cleaned, "errors": report.errors},
        )
        store.prune(max_sessions)
    except HistoryError as e:
        print_error(f"Failed to record deletion history: {e}")
        return

    if log.restorable_count:
        print_info(f"Run `reclaim restore` to bring back {log.restorable_count} items.")
