"""Build command implementation.

Materializes a spec file onto a host directory.
"""

from pathlib import Path
from typing import Annotated

import typer

from vfsbuild.cli.display import create_mutations_table, print_report_summary
from vfsbuild.cli.types import merge_options, open_root
from vfsbuild.core.builder import Builder
from vfsbuild.core.errors import BuildError
from vfsbuild.core.specfile import require_spec
from vfsbuild.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Build a spec file onto a directory.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def build_tree(
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
            help="Directory the tree is built into.",
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
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be created without writing anything.",
        ),
    ] = False,
) -> None:
    """Build the tree described by a spec file.

    Missing entries are created. Entries that already match are left
    alone, so building twice is safe. Entries that exist with a different
    kind, permission or contents are reported as conflicts and never
    overwritten.

    Examples:
        vfsbuild build -s tree.toml -r ./out            # Build into ./out
        vfsbuild build -s tree.toml -r ./out -u 022     # Override the umask
        vfsbuild build -s tree.toml -r ./out --dry-run  # Preview only
    """
    if ctx.invoked_subcommand is not None:
        return

    spec_file = require_spec(spec)
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    options = merge_options(spec_file.options, umask=umask, verbose=verbose, dry_run=dry_run)
    fs = open_root(root)

    try:
        report = Builder(options).build(fs, spec_file.tree)
    except BuildError as e:
        print_error(f"{type(e).__name__}: {e}")
        print_info("Entries created before the error were left in place.")
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Filesystem error: {e}")
        raise typer.Exit(code=1) from e

    if report.changed:
        console.print(create_mutations_table(report))
    print_report_summary(report)

    if dry_run:
        print_info("[DRY-RUN] No changes were made.")
