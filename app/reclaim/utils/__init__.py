"""Utility modules for reclaim.

This module exports commonly used utility functions.
"""

from reclaim.utils.formatting import (
    OutputMode,
    console,
    create_category_table,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "OutputMode",
    "console",
    "create_category_table",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
