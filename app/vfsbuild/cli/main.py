"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from vfsbuild import __version__
from vfsbuild.cli.commands import build, snapshot, verify

# Create main Typer app
app = typer.Typer(
    name="vfsbuild",
    help="Declarative, idempotent filesystem tree builder.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vfsbuild version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Echo every created entry.",
        ),
    ] = False,
) -> None:
    """vfsbuild - Declarative, idempotent filesystem tree builder.

    Describe directories and files in a spec file, build them onto a
    directory, and build again safely at any time.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.add_typer(build.app, name="build")
app.add_typer(verify.app, name="verify")
app.add_typer(snapshot.app, name="snapshot")


if __name__ == "__main__":
    app()
