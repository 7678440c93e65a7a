"""Scan command implementation.

Reports reclaimable space per category without removing anything.
"""

from typing import Annotated

import typer
from rich.markup import escape

from reclaim.cli.display import print_scan_json, print_scan_paths, print_scan_table
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
from reclaim.core.orchestrator import get_detectors, scan_all
from reclaim.utils.formatting import OutputMode, print_info, print_warning


def scan(
    ctx: typer.Context,
    path: PathArg = None,
    all_: AllOpt = False,
    cache: CacheOpt = False,
    temp: TempOpt = False,
    build: BuildOpt = False,
    trash: TrashOpt = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
    project_age: ProjectAgeOpt = None,
    min_age: MinAgeOpt = None,
    exclude: ExcludeOpt = None,
) -> None:
    """Scan for reclaimable disk space.

    Examples:
        reclaim scan --all                  # Every category below the current directory
        reclaim scan ~/src --build          # Build artifacts of inactive projects
        reclaim scan --cache --json         # JSON output for scripting
        reclaim scan --all -x '*/keep/*'    # Skip matching paths
    """
    categories = resolve_categories(all_=all_, cache=cache, temp=temp, build=build, trash=trash)
    if not categories:
        print_info(NO_CATEGORY_HINT)
        return

    root = resolve_root(path)
    config = load_effective_config(project_age=project_age, min_age=min_age, exclude=exclude)
    detectors = get_detectors(categories, config)

    results = scan_all(root, detectors)

    if json_output:
        print_scan_json(results)
        return

    for warning in results.warnings:
        print_warning(escape(warning))

    print_scan_table(results)
    if get_output_mode(ctx) is OutputMode.VERBOSE:
        print_scan_paths(results)
