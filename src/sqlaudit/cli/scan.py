"""CLI commands: sqlaudit scan / show — run a scan or view a saved report."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from sqlaudit.cli.options import (
    apply_view,
    fail,
    pages_option,
    read_report,
    severity_option,
)
from sqlaudit.client import AuditClient
from sqlaudit.display import ReportDisplay
from sqlaudit.errors import SqlAuditError
from sqlaudit.export.serializer import to_json
from sqlaudit.report.models import ScanReport
from sqlaudit.report.state import ViewState, load
from sqlaudit.session import AuditSession

console = Console(stderr=True)


@click.command()
@click.argument("repo_path", required=False)
@click.option(
    "--sql",
    "sql_file",
    type=click.Path(dir_okay=False),
    help="Review a single .sql script instead of a repository.",
)
@severity_option
@pages_option
@click.option("--files", is_flag=True, help="List every scanned file.")
@click.option(
    "--save",
    type=click.Path(dir_okay=False),
    help="Write the raw report as JSON for later `show`/`export`.",
)
@click.pass_context
def scan(
    ctx: click.Context,
    repo_path: str | None,
    sql_file: str | None,
    severity: str,
    pages: int,
    files: bool,
    save: str | None,
) -> None:
    """Scan a repository's MyBatis mappers (or a .sql script) for violations."""
    if repo_path and sql_file:
        raise click.UsageError("Give either REPO_PATH or --sql, not both.")

    config = ctx.obj["config"]
    target = sql_file or repo_path or ""
    console.print(
        f"[bold]SQL Audit[/bold] scanning [cyan]{escape(target)}[/cyan] "
        f"via [cyan]{config.server_url}[/cyan]\n"
    )

    async def _run() -> ScanReport | None:
        async with AuditClient(config) as client:
            session = AuditSession(client, download_dir=config.download_dir)
            if sql_file:
                await session.scan_sql(sql_file)
            else:
                await session.scan(target)
            return session.state.report

    try:
        report = asyncio.run(_run())
    except SqlAuditError as e:
        fail(console, e)
        return

    if report is None:
        return

    if save:
        Path(save).write_text(to_json(report), encoding="utf-8")
        console.print(f"[dim]Report saved to {save}[/dim]")

    _print_report(report, severity, pages, files)

    if report.error_count > 0:
        console.print(f"\n[red]{report.error_count} error violation(s)[/red]")
        sys.exit(1)


@click.command()
@click.argument("report_file", type=click.Path(exists=True, dir_okay=False))
@severity_option
@pages_option
@click.option("--files", is_flag=True, help="List every scanned file.")
def show(report_file: str, severity: str, pages: int, files: bool) -> None:
    """Show a saved JSON scan report."""
    report = read_report(report_file)
    _print_report(report, severity, pages, files)


def _print_report(report: ScanReport, severity: str, pages: int, files: bool) -> None:
    display = ReportDisplay()
    state = apply_view(load(ViewState(), report), severity, pages)
    console.print(display.render(state))
    if files:
        console.print(display.render_files(report))
