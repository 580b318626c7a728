"""CLI commands for vfsbuild.

This package contains all subcommand implementations.
"""

from vfsbuild.cli.commands import build, snapshot, verify

__all__ = ["build", "snapshot", "verify"]
