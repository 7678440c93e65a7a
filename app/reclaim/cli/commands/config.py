"""Config command implementation.

Shows, initializes and locates the reclaim configuration file.
"""

from typing import Annotated

import tomli_w
import typer
from rich.markup import escape
from rich.syntax import Syntax

from reclaim.core.config import ConfigError, ReclaimConfig, load_config, save_config
from reclaim.core.paths import get_config_path
from reclaim.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the configuration file.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Print the effective configuration as TOML."""
    try:
        config = load_config()
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    path = get_config_path()
    source = str(path) if path.exists() else "defaults (no config file)"
    console.print(f"[muted]# {escape(source)}[/]")
    console.print(Syntax(tomli_w.dumps(config.model_dump()), "toml", background_color="default"))


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write a config file with the default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists: {path}. Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(ReclaimConfig(), path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
