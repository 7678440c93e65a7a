"""XDG-compliant path management for reclaim.

This module provides standardized paths following the XDG Base Directory
Specification for configuration, state, and data lookups.

XDG defaults:
- Config: ~/.config/reclaim/
- State: ~/.local/state/reclaim/
- Data: ~/.local/share/ (used to locate the user's trash store)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "reclaim"


def _get_xdg_base(env_var: str, default_subdir: str) -> Path:
    """Get an XDG base directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_DATA_HOME").
        default_subdir: Default subdirectory under home (e.g., ".local/share").

    Returns:
        Path to the base directory (not application-specific).
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base)
    return Path.home() / default_subdir


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get the application-specific XDG directory.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    return _get_xdg_base(env_var, default_subdir) / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/reclaim/ (or XDG_CONFIG_HOME/reclaim/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes deletion history and activity logs that should
    persist between runs but is not configuration.

    Returns:
        Path to ~/.local/state/reclaim/ (or XDG_STATE_HOME/reclaim/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/reclaim/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_history_dir() -> Path:
    """Get the deletion history directory.

    Each cleaning session writes one JSONL file into this directory.

    Returns:
        Path to ~/.local/state/reclaim/history/.
    """
    return get_state_dir() / "history"


def get_log_dir() -> Path:
    """Get the activity log directory.

    Returns:
        Path to ~/.local/state/reclaim/logs/.
    """
    return get_state_dir() / "logs"


def get_home_trash_dir() -> Path:
    """Get the user's FreeDesktop.org home trash directory.

    Returns:
        Path to ~/.local/share/Trash (or XDG_DATA_HOME/Trash).
    """
    return _get_xdg_base("XDG_DATA_HOME", ".local/share") / "Trash"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_history_dir() -> Path:
    """Create the history directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_history_dir(), "history")


def ensure_log_dir() -> Path:
    """Create the activity log directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_log_dir(), "log")
