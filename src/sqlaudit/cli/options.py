"""Options and helpers shared by the report-viewing commands."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from sqlaudit.errors import SqlAuditError
from sqlaudit.report.grouping import SeverityFilter
from sqlaudit.report.loader import load_report_file
from sqlaudit.report.models import ScanReport
from sqlaudit.report.state import ViewState, advance_page, change_filter

severity_option = click.option(
    "--severity",
    "-s",
    type=click.Choice([f.value for f in SeverityFilter], case_sensitive=False),
    default=SeverityFilter.ALL.value,
    show_default=True,
    help="Only show violations of this severity.",
)

pages_option = click.option(
    "--pages",
    "-n",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of 50-violation pages to show.",
)


def apply_view(state: ViewState, severity: str, pages: int) -> ViewState:
    """Apply the requested filter, then reveal the requested number of pages."""
    state = change_filter(state, SeverityFilter(severity.upper()))
    for _ in range(pages - 1):
        state = advance_page(state)
    return state


def read_report(path: str) -> ScanReport:
    try:
        return load_report_file(path)
    except OSError as e:
        raise click.FileError(path, hint=e.strerror or str(e)) from e
    except (ValueError, TypeError) as e:
        raise click.ClickException(f"{path} is not a valid scan report: {e}") from e


def fail(console: Console, error: SqlAuditError) -> None:
    console.print(f"[red]{escape(str(error))}[/red]")
    raise SystemExit(1)
