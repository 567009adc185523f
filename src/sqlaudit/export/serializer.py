"""Local report serializers — Markdown and JSON documents from a ScanReport.

Both functions are pure and deterministic; the render service and the
client-side fallback produce byte-identical documents from the same report.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from datetime import datetime

from sqlaudit.report.diff import split_lines
from sqlaudit.report.grouping import group_by_file
from sqlaudit.report.loader import report_to_dict
from sqlaudit.report.models import ScanReport, Violation

FILENAME_PREFIX = "sql-audit-report"
SQL_UPLOAD_SCOPE = "SQL script upload mode"
VIOLATION_LIMIT = 1000


class ExportFormat(enum.Enum):
    """Supported export document formats."""

    MARKDOWN = "markdown"
    JSON = "json"

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else "json"

    @property
    def media_type(self) -> str:
        if self is ExportFormat.MARKDOWN:
            return "text/markdown; charset=utf-8"
        return "application/json; charset=utf-8"


@dataclass(frozen=True)
class ExportPayload:
    """A rendered export document ready to be downloaded."""

    filename: str
    media_type: str
    content: bytes


def to_markdown(report: ScanReport) -> str:
    lines: list[str] = [
        "# SQL Audit Compliance Report",
        "",
        f"**Scan time:** {report.scan_time or 'unknown'}",
        f"**Scan scope:** `{_code(report.repo_path or SQL_UPLOAD_SCOPE)}`",
        "",
    ]

    if report.limit_reached:
        lines += [
            "> ⚠️ **Warning: scan results truncated**",
            f"> An unusually large number of violations was detected; only the first "
            f"{VIOLATION_LIMIT} are kept and shown. Narrow the scan scope or refine "
            "the rule set.",
            "",
        ]

    lines += [
        "## 📊 Summary",
        f"- **Files scanned:** {report.total_files}",
        f"- **SQL statements:** {report.total_statements}",
        f"- **Total violations:** {report.total_violations} "
        f"(❌ Errors: {report.error_count}, "
        f"⚠️ Warnings: {report.warning_count}, "
        f"ℹ️ Info: {report.info_count})",
        "",
    ]

    if report.total_violations == 0:
        lines.append("✅ **All SQL statements comply with the rules**")
        return "\n".join(lines) + "\n"

    lines += ["## 🚫 Violations", ""]
    for path, violations in group_by_file(report.violations).items():
        lines += [f"### 📄 `{_code(path)}` ({len(violations)} items)", ""]
        for v in violations:
            lines += _violation_lines(v)
            lines.append("")

    lines += ["## 📁 Scanned files", ""]
    lines += [f"- `{_code(f)}`" for f in report.scanned_files]
    return "\n".join(lines) + "\n"


def _violation_lines(v: Violation) -> list[str]:
    rule = v.rule
    fragment = v.sql_fragment
    section = f"§{rule.section} " if rule.section else ""
    statement_type = (fragment.statement_type or "unknown").upper()
    statement_id = fragment.statement_id.strip() or "unknown"

    out = [
        f"**[{rule.severity.value}]** {section}{rule.name}",
        f"- **Location:** line {fragment.line_number} "
        f"({statement_type} #{statement_id})",
        f"- **Message:** {v.message}",
    ]
    if _present(v.suggestion):
        out.append(f"- **Suggestion:** {v.suggestion}")
    if _present(v.example_sql):
        out += [
            "- **Example rewrite (review before use):**",
            "",
            "```sql",
            v.example_sql,
            "```",
        ]
    if _present(v.matched_text):
        flattened = " ".join(split_lines(v.matched_text))
        out.append(f"- **Matched:** `{_code(flattened)}`")
    return out


def to_json(report: ScanReport) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


def render(fmt: ExportFormat, report: ScanReport) -> str:
    if fmt is ExportFormat.MARKDOWN:
        return to_markdown(report)
    return to_json(report)


def default_filename(fmt: ExportFormat, now: datetime | None = None) -> str:
    """Generated download name: sql-audit-report-<YYYYmmdd-HHMMSS>.<ext>."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"{FILENAME_PREFIX}-{stamp}.{fmt.extension}"


def build_payload(
    fmt: ExportFormat,
    report: ScanReport,
    now: datetime | None = None,
) -> ExportPayload:
    return ExportPayload(
        filename=default_filename(fmt, now),
        media_type=fmt.media_type,
        content=render(fmt, report).encode("utf-8"),
    )


def _code(text: str) -> str:
    """Escape backticks for an inline code span."""
    return text.replace("`", "\\`")


def _present(text: str | None) -> bool:
    return bool(text and text.strip())
