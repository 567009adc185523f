"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from sqlaudit import __version__
from sqlaudit.config import SqlAuditConfig


@click.group()
@click.version_option(version=__version__, prog_name="sqlaudit")
@click.option(
    "--server",
    "server_url",
    envvar="SQLAUDIT_SERVER_URL",
    help="Base URL of the audit service.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, server_url: str | None, verbose: bool) -> None:
    """SQL Audit — review, filter and export SQL compliance scan reports."""
    ctx.ensure_object(dict)

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = SqlAuditConfig.load()
    if server_url:
        config.server_url = server_url
    config.verbose = verbose
    ctx.obj["config"] = config


def _register_commands() -> None:
    from sqlaudit.cli.diff import diff  # noqa: F811
    from sqlaudit.cli.export import export  # noqa: F811
    from sqlaudit.cli.rules import rules  # noqa: F811
    from sqlaudit.cli.scan import scan, show  # noqa: F811
    from sqlaudit.cli.server import server  # noqa: F811

    main.add_command(scan)
    main.add_command(show)
    main.add_command(diff)
    main.add_command(export)
    main.add_command(rules)
    main.add_command(server)


_register_commands()
