"""CLI commands for reclaim.

This package contains all subcommand implementations.
"""

from reclaim.cli.commands import clean, config, history, restore, scan

__all__ = ["clean", "config", "history", "restore", "scan"]
