"""CLI command: sqlaudit diff <report> <index> — compare original SQL with its rewrite."""

from __future__ import annotations

import click
from rich.console import Console

from sqlaudit.cli.options import fail, read_report, severity_option
from sqlaudit.clipboard import ClipboardService, CopyOutcome
from sqlaudit.display import ReportDisplay
from sqlaudit.errors import ClipboardError
from sqlaudit.report.grouping import SeverityFilter, group_by_file
from sqlaudit.report.pagination import flatten

console = Console(stderr=True)


@click.command()
@click.argument("report_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("index", type=click.IntRange(min=1))
@severity_option
@click.option("--copy", is_flag=True, help="Copy the example SQL to the clipboard.")
def diff(report_file: str, index: int, severity: str, copy: bool) -> None:
    """Show the compare view for the INDEX-th listed violation (1-based)."""
    report = read_report(report_file)
    pairs = flatten(group_by_file(report.violations, SeverityFilter(severity.upper())))
    if index > len(pairs):
        raise click.BadParameter(
            f"only {len(pairs)} violation(s) match", param_hint="INDEX"
        )

    _path, violation = pairs[index - 1]
    if not violation.example_sql:
        console.print("[dim]No example rewrite for this violation.[/dim]")
        return

    console.print(ReportDisplay().render_compare(violation))

    if copy:
        try:
            outcome = ClipboardService().copy(violation.example_sql)
        except ClipboardError as e:
            fail(console, e)
            return
        if outcome is not CopyOutcome.SKIPPED:
            console.print("[green]Example SQL copied to clipboard.[/green]")
