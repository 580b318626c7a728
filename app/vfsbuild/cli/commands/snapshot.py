"""Snapshot command implementation.

Captures an existing directory as a spec file.
"""

from pathlib import Path
from typing import Annotated

import typer

from vfsbuild.cli.types import open_root
from vfsbuild.core.snapshot import snapshot
from vfsbuild.core.specfile import SpecFile, SpecFileError, dumps_spec, save_spec
from vfsbuild.utils.formatting import print_error, print_success

app = typer.Typer(
    help="Capture a directory as a spec file.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def snapshot_tree(
    ctx: typer.Context,
    root: Annotated[
        Path,
        typer.Option(
            "--root",
            "-r",
            help="Directory to capture.",
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the spec file here instead of stdout.",
        ),
    ] = None,
) -> None:
    """Capture a directory as a spec file.

    Every directory and regular file is recorded with its observed
    permission and contents. Building the result onto the same directory
    with a zero umask changes nothing.

    Examples:
        vfsbuild snapshot -r ./out                # Print to stdout
        vfsbuild snapshot -r ./out -o tree.toml   # Save to a file
    """
    if ctx.invoked_subcommand is not None:
        return

    fs = open_root(root)
    try:
        spec_file = SpecFile(tree=snapshot(fs))
    except OSError as e:
        print_error(f"Filesystem error: {e}")
        raise typer.Exit(code=1) from e

    if output is None:
        typer.echo(dumps_spec(spec_file), nl=False)
        return

    try:
        saved = save_spec(spec_file, output)
    except SpecFileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Spec file written: {saved}")
