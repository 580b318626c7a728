"""Rich console formatting utilities.

Provides consistent formatting for CLI output and verbose build echo
using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "bold_header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "info": "#0ec1c8",
        "added": "#c1ff62",
        "changed": "#0e8ac8",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def format_perm(perm: int) -> str:
    """Format permission bits as a four-digit octal string, e.g. "0755"."""
    return f"{perm:04o}"


def format_size(size_bytes: int) -> str:
    """Format a byte count for display.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(2048)
        '2.0 KB'
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = size_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}", highlight=False)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
