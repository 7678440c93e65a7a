"""Shared types and utilities for CLI commands.

This module provides the category options and helper functions used by
both the scan and clean commands.
"""

from pathlib import Path
from typing import Annotated

import typer

from reclaim.core.config import ConfigError, ReclaimConfig, load_config
from reclaim.core.orchestrator import selected_categories
from reclaim.models.scan_result import Category
from reclaim.utils.formatting import OutputMode, print_error

NO_CATEGORY_HINT = (
    "No categories specified. Use --all or specify categories like "
    "--cache, --temp, --build, --trash"
)

PathArg = Annotated[
    Path | None,
    typer.Argument(help="Directory to scan (default: current directory)."),
]
AllOpt = Annotated[bool, typer.Option("--all", "-a", help="Enable every category.")]
CacheOpt = Annotated[bool, typer.Option("--cache", help="Tool and application caches.")]
TempOpt = Annotated[bool, typer.Option("--temp", help="Stale temporary and backup files.")]
BuildOpt = Annotated[
    bool, typer.Option("--build", help="Build artifacts of inactive projects.")
]
TrashOpt = Annotated[bool, typer.Option("--trash", help="Items currently in the trash.")]
ProjectAgeOpt = Annotated[
    int | None,
    typer.Option("--project-age", min=0, help="Days a project must be inactive."),
]
MinAgeOpt = Annotated[
    int | None,
    typer.Option("--min-age", min=0, help="Days a temp file must be untouched."),
]
ExcludeOpt = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Exclude paths matching PATTERN (repeatable)."),
]


def get_output_mode(ctx: typer.Context) -> OutputMode:
    """Derive the output mode from the global --verbose/--quiet options."""
    obj = ctx.obj or {}
    if obj.get("quiet"):
        return OutputMode.QUIET
    if obj.get("verbose"):
        return OutputMode.VERBOSE
    return OutputMode.NORMAL


def resolve_categories(
    *, all_: bool, cache: bool, temp: bool, build: bool, trash: bool
) -> tuple[Category, ...]:
    """Turn category flags into the categories to process."""
    flags = {
        Category.CACHE: cache,
        Category.TEMP: temp,
        Category.BUILD: build,
        Category.TRASH: trash,
    }
    return tuple(selected_categories(flags, all_categories=all_))


def resolve_root(path: Path | None) -> Path:
    """Resolve the scan root, exiting with code 1 if it is not a directory."""
    root = (path or Path.cwd()).expanduser().resolve()
    if not root.is_dir():
        print_error(f"Not a directory: {root}")
        raise typer.Exit(code=1)
    return root


def load_effective_config(
    *,
    project_age: int | None,
    min_age: int | None,
    exclude: list[str] | None,
) -> ReclaimConfig:
    """Load the user configuration with command-line overrides applied.

    Exits with code 1 if the configuration file is invalid.
    """
    try:
        config = load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    return config.with_overrides(
        project_age_days=project_age,
        min_age_days=min_age,
        exclude=exclude,
    )
