"""Color theme for the reclaim CLI.

The bundled palette in ``reclaim/data/theme.toml`` can be overridden color
by color from a ``[colors]`` table in ``~/.config/reclaim/theme.toml``.
"""

import functools
import logging
import tomllib
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

from reclaim.core.paths import get_config_dir

logger = logging.getLogger(__name__)

HexColor = Annotated[str, Field(pattern=r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")]


class ThemeColors(BaseModel):
    """Palette of the CLI, one #RGB or #RRGGBB color per role."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    restored: HexColor = "#c1ff62"
    not_found: HexColor = "#d44ebc"
    category: HexColor = "#69B9A1"
    size: HexColor = "#0ec1c8"


def get_user_theme_path() -> Path:
    """Path of the user's theme override file."""
    return get_config_dir() / "theme.toml"


def _read_colors(source: Traversable) -> dict[str, str]:
    """Read the ``[colors]`` table of a theme file.

    A missing or unreadable file yields no colors. Non-string values are
    skipped.
    """
    try:
        with source.open("rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", source, e)
        return {}

    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", source)
        return {}
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Load the bundled palette with the user's overrides applied.

    If the merged palette does not validate, the overrides are dropped as
    a whole and the defaults are used.
    """
    bundled = _read_colors(resources.files("reclaim.data") / "theme.toml")
    overrides = _read_colors(get_user_theme_path())
    if overrides:
        logger.debug("Applying %d theme overrides", len(overrides))

    try:
        return ThemeColors(**{**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for a palette (loaded when not given)."""
    if colors is None:
        colors = load_theme()

    styles = colors.model_dump()
    styles.update(
        error=f"bold {colors.error}",
        category=f"bold {colors.category}",
        bold_header=f"bold {colors.header}",
        path=f"bold {colors.text}",
    )
    return Theme(styles)


@functools.cache
def get_theme() -> Theme:
    """Rich theme shared by the consoles, loaded on first use."""
    return get_rich_theme()
