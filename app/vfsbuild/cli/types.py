"""Shared types and utilities for CLI commands.

Merges spec file options with command-line overrides and opens the
target filesystem, exiting with a readable error when either fails.
"""

from pathlib import Path

import typer
from pydantic import ValidationError

from vfsbuild.core.options import BuilderOptions
from vfsbuild.filesystem.disk import RootedFilesystem
from vfsbuild.utils.formatting import print_error


def merge_options(
    base: BuilderOptions,
    *,
    umask: str | None = None,
    verbose: bool = False,
    dry_run: bool = False,
) -> BuilderOptions:
    """Apply command-line overrides on top of spec file options.

    Flags only ever switch behavior on; a spec file that asks for verbose
    output stays verbose.

    Raises:
        typer.Exit: If the umask override is invalid.
    """
    data = base.model_dump()
    if umask is not None:
        data["umask"] = umask
    data["verbose"] = data["verbose"] or verbose
    data["dry_run"] = data["dry_run"] or dry_run
    try:
        return BuilderOptions.model_validate(data)
    except ValidationError as e:
        print_error(f"Invalid options: {e.errors()[0]['msg']}")
        raise typer.Exit(code=1) from e


def open_root(root: Path) -> RootedFilesystem:
    """Open a host directory as the target filesystem.

    Raises:
        typer.Exit: If root is not an existing directory.
    """
    try:
        return RootedFilesystem(root)
    except NotADirectoryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
