"""Utility modules for vfsbuild.

This module exports commonly used utility functions.
"""

from vfsbuild.utils.formatting import (
    console,
    err_console,
    format_perm,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_perm",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
