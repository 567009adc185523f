"""CLI commands: sqlaudit rules list / upload / clear."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.markup import escape

from sqlaudit.cli.options import fail
from sqlaudit.client import AuditClient
from sqlaudit.display import ReportDisplay
from sqlaudit.errors import SqlAuditError

console = Console(stderr=True)


@click.group()
def rules() -> None:
    """Inspect and manage the service's audit rules."""


@rules.command("list")
@click.option("--default", "default_only", is_flag=True, help="Built-in rules only.")
@click.pass_context
def list_rules(ctx: click.Context, default_only: bool) -> None:
    """List the rules the service checks against."""
    config = ctx.obj["config"]

    async def _run():
        async with AuditClient(config) as client:
            if default_only:
                return await client.get_default_rules()
            return await client.get_rules()

    try:
        loaded = asyncio.run(_run())
    except SqlAuditError as e:
        fail(console, e)
        return

    console.print(ReportDisplay().render_rules(loaded))


@rules.command("upload")
@click.argument("docx_file", type=click.Path(dir_okay=False))
@click.pass_context
def upload(ctx: click.Context, docx_file: str) -> None:
    """Upload a Word (.docx) rule document."""
    config = ctx.obj["config"]

    async def _run() -> str:
        async with AuditClient(config) as client:
            return await client.upload_rules(docx_file)

    try:
        message = asyncio.run(_run())
    except SqlAuditError as e:
        fail(console, e)
        return

    console.print(f"[green]{escape(message or 'Rules uploaded')}[/green]")


@rules.command("clear")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Remove all custom rules."""
    config = ctx.obj["config"]

    async def _run() -> None:
        async with AuditClient(config) as client:
            await client.clear_custom_rules()

    try:
        asyncio.run(_run())
    except SqlAuditError as e:
        fail(console, e)
        return

    console.print("[green]Custom rules cleared[/green]")
