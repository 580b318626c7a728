"""Verify command implementation.

Checks whether a directory already satisfies a spec file, without
changing anything.
"""

from pathlib import Path
from typing import Annotated

import typer

from vfsbuild.cli.display import create_mutations_table
from vfsbuild.cli.types import merge_options, open_root
from vfsbuild.core.builder import Builder
from vfsbuild.core.errors import BuildError
from vfsbuild.core.specfile import require_spec
from vfsbuild.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Check a directory against a spec file.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def verify_tree(
    ctx: typer.Context,
    spec: Annotated[
        Path,
        typer.Option(
            "--spec",
            "-s",
            help="Spec file describing the tree.",
        ),
    ],
    root: Annotated[
        Path,
        typer.Option(
            "--root",
            "-r",
            help="Directory to check.",
        ),
    ],
    umask: Annotated[
        str | None,
        typer.Option(
            "--umask",
            "-u",
            help="Octal umask, overrides the spec file (e.g. 022).",
        ),
    ] = None,
) -> None:
    """Verify that a directory already satisfies a spec file.

    Exits with code 0 when building would change nothing, and 1 when
    entries are missing or conflict with the spec file.

    Examples:
        vfsbuild verify -s tree.toml -r ./out
    """
    if ctx.invoked_subcommand is not None:
        return

    spec_file = require_spec(spec)
    options = merge_options(spec_file.options, umask=umask, dry_run=True)
    fs = open_root(root)

    try:
        report = Builder(options).build(fs, spec_file.tree)
    except BuildError as e:
        print_error(f"{type(e).__name__}: {e}")
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Filesystem error: {e}")
        raise typer.Exit(code=1) from e

    if report.changed:
        console.print(create_mutations_table(report, title="Missing Entries"))
        print_error(f"{len(report.mutations)} entries missing from {root}")
        raise typer.Exit(code=1)

    print_success(f"{root} satisfies {spec}.")
