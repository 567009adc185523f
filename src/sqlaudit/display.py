"""Report display — builds Rich renderables from a report and its view state."""

from __future__ import annotations

from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sqlaudit.report.diff import changed_count, compare, split_lines
from sqlaudit.report.grouping import (
    SeverityFilter,
    group_rules_by_category,
    severity_counts,
)
from sqlaudit.report.models import Rule, ScanReport, Severity, Violation
from sqlaudit.report.pagination import PageView
from sqlaudit.report.state import ViewState, visible

_SEVERITY_COLORS = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def severity_markup(severity: Severity) -> str:
    color = _SEVERITY_COLORS.get(severity, "white")
    return f"[{color}]{severity.value}[/{color}]"


class ReportDisplay:
    """Builds Rich objects for the terminal front end."""

    def render(self, state: ViewState) -> Group:
        """Full report view: summary, filters, and the visible violations."""
        report = state.report
        if report is None:
            return Group(Text("No report loaded.", style="dim italic"))

        parts: list = [self.render_summary(report)]
        if report.total_violations == 0:
            parts.append(self.render_pass(report))
            return Group(*parts)

        parts.append(self.render_filters(report, state.severity_filter))
        page = visible(state)
        if not page.groups:
            parts.append(
                Text("No violations match this filter.", style="dim italic")
            )
        else:
            parts.append(self.render_violations(page))
        return Group(*parts)

    def render_summary(self, report: ScanReport) -> Panel:
        scope = report.repo_path or "SQL script upload"
        lines = [
            f"[bold]SQL Audit[/bold]  Scope: [cyan]{escape(scope)}[/cyan]   "
            f"Scanned: {escape(report.scan_time or 'unknown')}",
            f"Files: {report.total_files}   Statements: {report.total_statements}   "
            f"[red]Errors: {report.error_count}[/red]   "
            f"[yellow]Warnings: {report.warning_count}[/yellow]   "
            f"[blue]Info: {report.info_count}[/blue]",
        ]
        if report.limit_reached:
            lines.append(
                "[bold yellow]Results truncated:[/bold yellow] only the first "
                "1000 violations were kept."
            )
        for notice in report.notices:
            lines.append(f"[dim]Note:[/dim] {escape(notice)}")
        return Panel(Text.from_markup("\n".join(lines)), style="bold")

    def render_pass(self, report: ScanReport) -> Text:
        return Text.from_markup(
            "[green]All SQL statements comply with the rules.[/green] "
            f"{report.total_files} files, {report.total_statements} statements "
            "scanned, no violations found."
        )

    def render_filters(
        self, report: ScanReport, active: SeverityFilter
    ) -> Text:
        counts = severity_counts(report)
        options = [SeverityFilter.ALL, SeverityFilter.ERROR, SeverityFilter.WARNING]
        if counts.offers_info:
            options.append(SeverityFilter.INFO)

        text = Text("Filter: ", style="dim")
        for option in options:
            label = f"{option.value.lower()} ({counts.for_filter(option)})"
            style = "bold reverse" if option is active else ""
            text.append(f" {label} ", style=style)
        return text

    def render_violations(self, page: PageView) -> Group:
        panels: list = []
        for path, violations in page.groups.items():
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Severity", width=8)
            table.add_column("Section", width=8)
            table.add_column("Rule", ratio=1)
            table.add_column("Statement", no_wrap=True)
            table.add_column("Line", justify="right", width=5)
            table.add_column("Message", ratio=2)

            for v in violations:
                fragment = v.sql_fragment
                table.add_row(
                    severity_markup(v.rule.severity),
                    escape(f"§{v.rule.section}") if v.rule.section else "",
                    escape(v.rule.name),
                    escape(
                        f"{(fragment.statement_type or 'unknown').upper()} "
                        f"#{fragment.statement_id or 'unknown'}"
                    ),
                    str(fragment.line_number),
                    _message_cell(v),
                )

            panels.append(
                Panel(
                    table,
                    title=f"{escape(path)} ({len(violations)})",
                    title_align="left",
                    border_style="blue",
                )
            )

        footer = f"Showing {page.shown} of {page.total}"
        if page.has_more:
            footer += f" — {page.remaining} more (use --pages to show more)"
        panels.append(Text(footer, style="dim"))
        return Group(*panels)

    def render_compare(self, violation: Violation) -> Panel:
        """Side-by-side original vs. example rewrite, one row per line."""
        rows = compare(violation.sql_fragment.sql_text, violation.example_sql)

        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("#", justify="right", width=4)
        table.add_column("Original SQL", ratio=1)
        table.add_column("#", justify="right", width=4)
        table.add_column("Example rewrite", ratio=1)

        for row in rows:
            style = "on grey15" if row.changed else ""
            table.add_row(
                str(row.number),
                Text(row.left, style="red" if row.changed else ""),
                str(row.number),
                Text(row.right, style="green" if row.changed else ""),
                style=style,
            )

        fragment = violation.sql_fragment
        title = (
            f"{escape(violation.rule.name)} — {escape(fragment.relative_path)}:"
            f"{fragment.line_number} "
            f"({changed_count(rows)} changed)"
        )
        return Panel(table, title=title, title_align="left", border_style="cyan")

    def render_rules(self, rules: list[Rule]) -> Group:
        categories, custom = group_rules_by_category(rules)
        parts: list = [Text(f"{len(rules)} rules", style="bold")]

        for category, members in categories.items():
            table = Table(show_header=False, box=None, expand=True)
            table.add_column("Section", width=8)
            table.add_column("Severity", width=8)
            table.add_column("Rule", ratio=1)
            for rule in members:
                table.add_row(
                    escape(rule.section or ""),
                    severity_markup(rule.severity),
                    escape(rule.name),
                )
            parts.append(
                Panel(table, title=f"§ {escape(category)}", title_align="left")
            )

        if custom:
            table = Table(show_header=False, box=None, expand=True)
            table.add_column("Severity", width=8)
            table.add_column("Rule")
            table.add_column("Description", ratio=1)
            for rule in custom:
                table.add_row(
                    severity_markup(rule.severity),
                    escape(rule.name),
                    escape(rule.description or ""),
                )
            parts.append(Panel(table, title="Custom rules", title_align="left"))
        return Group(*parts)

    def render_files(self, report: ScanReport) -> Panel:
        body = "\n".join(report.scanned_files) or "(none)"
        return Panel(
            Text(body),
            title=f"Scanned files ({len(report.scanned_files)})",
            title_align="left",
            border_style="dim",
        )


def _message_cell(v: Violation) -> Text:
    text = Text(v.message)
    if v.suggestion:
        text.append(f"\nFix: {v.suggestion}", style="green")
    if v.matched_text:
        text.append("\n" + " ".join(split_lines(v.matched_text)), style="dim")
    return text
