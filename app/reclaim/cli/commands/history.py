"""History command for viewing past clean sessions.

This module provides the `reclaim history` command for listing recorded
deletion sessions and inspecting a single session's records.
"""

import json
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from reclaim.cli.display import format_timestamp
from reclaim.core.history import HistoryError, HistoryStore
from reclaim.models.history import DeletionLog
from reclaim.utils.formatting import console, format_size, print_error, print_info, print_warning

app = typer.Typer(
    name="history",
    help="View past clean sessions.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Maximum number of sessions to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show recorded clean sessions, newest first.

    Examples:
        reclaim history              # Show last 20 sessions
        reclaim history -n 50        # Show last 50 sessions
        reclaim history --json       # JSON output for scripting
        reclaim history show ID      # Records of one session
    """
    if ctx.invoked_subcommand is not None:
        return

    store = HistoryStore()
    logs: list[DeletionLog] = []
    try:
        for log_id in store.list_logs()[:limit]:
            try:
                logs.append(store.load_log(log_id))
            except HistoryError as e:
                print_warning(escape(str(e)))
    except HistoryError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if not logs:
        print_info("No clean sessions recorded.")
        return

    if json_output:
        _print_json(logs)
    else:
        _print_table(logs)


@app.command()
def show(
    log_id: Annotated[str, typer.Argument(help="Session identifier.")],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the records of one session."""
    try:
        log = HistoryStore().load_log(log_id)
    except HistoryError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if json_output:
        console.print_json(
            json.dumps({**log.header_dict(), "records": [r.to_dict() for r in log.records]})
        )
        return

    table = Table(title=f"Session {log.id}", border_style="border", header_style="bold_header")
    table.add_column("Path", style="text", overflow="fold")
    table.add_column("Category", style="category")
    table.add_column("Size", justify="right", style="size")
    table.add_column("Status")

    for record in log.records:
        if not record.success:
            status = f"[error]failed[/] [muted]{escape(record.error or '')}[/]"
        elif record.permanent:
            status = "[warning]deleted[/]"
        else:
            status = "[success]in trash[/]"
        table.add_row(
            escape(record.path),
            record.category or "-",
            format_size(record.size_bytes),
            status,
        )

    console.print(table)
    console.print(
        f"[muted]{format_timestamp(log.created_at)}: {len(log.records)} records, "
        f"{log.restorable_count} restorable ({format_size(log.restorable_bytes)})[/]"
    )


def _print_table(logs: list[DeletionLog]) -> None:
    """Print sessions as Rich table.

    Args:
        logs: Sessions to display, newest first.
    """
    table = Table(title="Clean History", border_style="border", header_style="bold_header")
    table.add_column("ID", style="muted")
    table.add_column("Date", style="info")
    table.add_column("Records", justify="right")
    table.add_column("Restorable", justify="right", style="success")
    table.add_column("Size", justify="right", style="size")

    for log in logs:
        table.add_row(
            log.id,
            format_timestamp(log.created_at),
            str(len(log.records)),
            str(log.restorable_count),
            format_size(log.total_bytes),
        )

    console.print(table)


def _print_json(logs: list[DeletionLog]) -> None:
    """Print sessions as JSON.

    Args:
        logs: Sessions to output.
    """
    data = [
        {
            **log.header_dict(),
            "records": len(log.records),
            "restorable": log.restorable_count,
            "size_bytes": log.total_bytes,
        }
        for log in logs
    ]
    console.print_json(json.dumps(data))
