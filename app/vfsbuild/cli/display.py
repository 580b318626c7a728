"""Shared Rich display functions for build reports.

Provides the table and summary printers used by the build and verify
commands.
"""

from rich.markup import escape
from rich.table import Table

from vfsbuild.models.report import BuildReport
from vfsbuild.utils.formatting import console, format_perm, format_size, print_success


def create_mutations_table(report: BuildReport, title: str | None = None) -> Table:
    """Create a Rich table listing the entries a build created.

    Args:
        report: Build report to display.
        title: Table title. Defaults depend on whether the build was a dry run.

    Returns:
        Rich Table configured for mutation display.
    """
    if title is None:
        title = "Planned Changes (Dry Run)" if report.dry_run else "Created Entries"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=8, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Mode", width=6, style="muted")
    table.add_column("Size", justify="right", style="info")

    for mutation in report.mutations:
        if mutation.is_dir:
            action = "[added]+mkdir[/added]"
            size = ""
        else:
            action = "[added]+write[/added]"
            size = format_size(mutation.size)
        table.add_row(action, escape(mutation.path), format_perm(mutation.perm), size)

    return table


def print_report_summary(report: BuildReport) -> None:
    """Print a one-line summary of a build report.

    Args:
        report: Build report to summarize.
    """
    dirs = sum(1 for m in report.mutations if m.is_dir)
    files = len(report.mutations) - dirs

    if not report.changed:
        print_success("Tree is up to date. Nothing to do.")
        return

    verb = "Would create" if report.dry_run else "Created"
    console.print(
        f"\n{verb} [added]{dirs} director{'y' if dirs == 1 else 'ies'}[/added], "
        f"[added]{files} file{'' if files == 1 else 's'}[/added]"
    )
