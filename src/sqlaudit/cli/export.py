"""CLI command: sqlaudit export <report> — download a Markdown or JSON report."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click
from rich.console import Console

from sqlaudit.cli.options import fail, read_report
from sqlaudit.client import AuditClient
from sqlaudit.errors import SqlAuditError
from sqlaudit.export.serializer import ExportFormat
from sqlaudit.export.transport import ExportResult, ExportTransport

console = Console(stderr=True)


@click.command()
@click.argument("report_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice([f.value for f in ExportFormat], case_sensitive=False),
    default=ExportFormat.MARKDOWN.value,
    show_default=True,
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    help="Directory to save into (default: current directory).",
)
@click.pass_context
def export(
    ctx: click.Context,
    report_file: str,
    fmt: str,
    output_dir: str | None,
) -> None:
    """Export a saved scan report, rendered by the service when reachable."""
    config = ctx.obj["config"]
    report = read_report(report_file)
    target = Path(output_dir) if output_dir else config.download_dir

    async def _run() -> ExportResult:
        async with AuditClient(config) as client:
            transport = ExportTransport(client, target)
            return await transport.export(fmt.lower(), report)

    try:
        result = asyncio.run(_run())
    except SqlAuditError as e:
        fail(console, e)
        return

    console.print(f"[green]Report saved to[/green] [cyan]{result.path}[/cyan]")
