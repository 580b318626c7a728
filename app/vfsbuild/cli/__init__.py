"""CLI package for vfsbuild.

This package contains the Typer application and all subcommands.
"""

from vfsbuild.cli.main import app

__all__ = ["app"]
