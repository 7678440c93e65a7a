"""User configuration.

This module provides the configuration model and I/O functions for
reclaim. Configuration is stored in ~/.config/reclaim/config.toml and
every section is optional: a missing file yields the defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reclaim.core.paths import get_config_path

logger = logging.getLogger(__name__)


class ThresholdsConfig(BaseModel):
    """Age thresholds used by category detectors.

    Attributes:
        project_age_days: Build artifacts are reclaimable once their project
            has not been modified for this many days.
        min_age_days: Temp files are reclaimable once untouched for this
            many days.
    """

    model_config = ConfigDict(extra="forbid")

    project_age_days: Annotated[int, Field(ge=0, le=3650)] = 14
    min_age_days: Annotated[int, Field(ge=0, le=3650)] = 1


class ExclusionsConfig(BaseModel):
    """Paths that no detector may report.

    Attributes:
        patterns: fnmatch-style patterns matched against absolute paths.
    """

    model_config = ConfigDict(extra="forbid")

    patterns: list[str] = Field(default_factory=list)


class HistoryConfig(BaseModel):
    """Deletion history retention.

    Attributes:
        max_sessions: Number of session logs kept after each clean.
    """

    model_config = ConfigDict(extra="forbid")

    max_sessions: Annotated[int, Field(ge=1, le=10000)] = 50


class ReclaimConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    exclusions: ExclusionsConfig = Field(default_factory=ExclusionsConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)

    def with_overrides(
        self,
        *,
        project_age_days: int | None = None,
        min_age_days: int | None = None,
        exclude: list[str] | None = None,
    ) -> "ReclaimConfig":
        """Return a copy with command-line overrides applied.

        Args:
            project_age_days: Override for thresholds.project_age_days.
            min_age_days: Override for thresholds.min_age_days.
            exclude: Extra exclusion patterns, appended to the configured ones.

        Returns:
            New validated ReclaimConfig.
        """
        data = self.model_dump()
        if project_age_days is not None:
            data["thresholds"]["project_age_days"] = project_age_days
        if min_age_days is not None:
            data["thresholds"]["min_age_days"] = min_age_days
        if exclude:
            data["exclusions"]["patterns"] = [*data["exclusions"]["patterns"], *exclude]
        return ReclaimConfig.model_validate(data)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None, *, missing_ok: bool = True) -> ReclaimConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.
        missing_ok: Return defaults when the file does not exist.

    Returns:
        Validated ReclaimConfig object.

    Raises:
        ConfigNotFoundError: If the file doesn't exist and missing_ok is False.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if missing_ok:
            logger.debug("No config file at %s, using defaults", config_path)
            return ReclaimConfig()
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return ReclaimConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: ReclaimConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The ReclaimConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create config directory: {e}") from e

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
