"""Load ScanReport objects from the audit service's JSON shape, and dump them back.

The wire format uses camelCase keys. Absent optional fields fall back to the
defaults below; a rule without a recognizable severity is rejected because the
report could not be grouped or filtered without it.
"""

from __future__ import annotations

import json
from pathlib import Path

from sqlaudit.report.models import (
    Rule,
    RuleSource,
    RuleType,
    ScanReport,
    Severity,
    SqlFragment,
    Violation,
)

UNNAMED_RULE = "Unnamed rule"


def load_report(data: dict) -> ScanReport:
    """Build a ScanReport from a decoded JSON mapping."""
    if not isinstance(data, dict):
        raise ValueError("Scan report must be a JSON object")

    violations = tuple(_parse_violation(v) for v in data.get("violations") or [])

    tally = {severity: 0 for severity in Severity}
    for v in violations:
        tally[v.rule.severity] += 1

    error_count = _int(data, "errorCount", tally[Severity.ERROR])
    warning_count = _int(data, "warningCount", tally[Severity.WARNING])
    info_count = _int(data, "infoCount", tally[Severity.INFO])

    return ScanReport(
        total_files=_int(data, "totalFiles", 0),
        total_statements=_int(data, "totalStatements", 0),
        total_violations=_int(
            data, "totalViolations", error_count + warning_count + info_count
        ),
        error_count=error_count,
        warning_count=warning_count,
        info_count=info_count,
        scan_time=_scan_time(data.get("scanTime")),
        repo_path=_blank_to_none(data.get("repoPath")),
        limit_reached=bool(data.get("limitReached", False)),
        notices=tuple(str(n) for n in data.get("notices") or []),
        scanned_files=tuple(str(f) for f in data.get("scannedFiles") or []),
        violations=violations,
    )


def load_report_from_string(text: str) -> ScanReport:
    """Parse a JSON string into a ScanReport."""
    return load_report(json.loads(text))


def load_report_file(path: str | Path) -> ScanReport:
    """Load a ScanReport from a JSON file (e.g. a previous JSON export)."""
    return load_report_from_string(Path(path).read_text(encoding="utf-8"))


def parse_rule(data: dict) -> Rule:
    if not isinstance(data, dict):
        raise ValueError("Rule must be a JSON object")

    raw_severity = data.get("severity")
    if raw_severity is None:
        raise ValueError(f"Rule {data.get('name')!r} has no severity")
    try:
        severity = Severity(str(raw_severity).upper())
    except ValueError:
        raise ValueError(f"Unknown rule severity: {raw_severity!r}") from None

    raw_type = data.get("type")
    return Rule(
        name=data.get("name") or UNNAMED_RULE,
        severity=severity,
        source=RuleSource(str(data.get("source") or "DEFAULT").upper()),
        id=data.get("id"),
        section=_blank_to_none(data.get("section")),
        category=_blank_to_none(data.get("category")),
        description=data.get("description"),
        type=RuleType(str(raw_type).upper()) if raw_type else None,
        pattern=data.get("pattern"),
        checker_name=data.get("checkerName"),
    )


def parse_rules(data: list) -> list[Rule]:
    if not isinstance(data, list):
        raise ValueError("Rule list must be a JSON array")
    return [parse_rule(r) for r in data]


def _parse_violation(data: dict) -> Violation:
    if not isinstance(data, dict):
        raise ValueError("Violation must be a JSON object")
    return Violation(
        rule=parse_rule(data.get("rule") or {}),
        sql_fragment=_parse_fragment(data.get("sqlFragment") or {}),
        message=data.get("message") or "",
        matched_text=data.get("matchedText"),
        suggestion=data.get("suggestion"),
        example_sql=data.get("exampleSql"),
    )


def _parse_fragment(data: dict) -> SqlFragment:
    if not isinstance(data, dict):
        raise ValueError("sqlFragment must be a JSON object")
    return SqlFragment(
        relative_path=data.get("relativePath") or "",
        statement_type=data.get("statementType") or "",
        statement_id=data.get("statementId") or "",
        line_number=int(data.get("lineNumber") or 0),
        sql_text=data.get("sqlText") or "",
        file_path=data.get("filePath"),
        namespace=data.get("namespace"),
    )


def report_to_dict(report: ScanReport) -> dict:
    """Dump a ScanReport into the camelCase wire shape."""
    return {
        "repoPath": report.repo_path,
        "scanTime": report.scan_time,
        "totalFiles": report.total_files,
        "totalStatements": report.total_statements,
        "totalViolations": report.total_violations,
        "errorCount": report.error_count,
        "warningCount": report.warning_count,
        "infoCount": report.info_count,
        "limitReached": report.limit_reached,
        "notices": list(report.notices),
        "scannedFiles": list(report.scanned_files),
        "violations": [violation_to_dict(v) for v in report.violations],
    }


def violation_to_dict(violation: Violation) -> dict:
    fragment = violation.sql_fragment
    return {
        "rule": rule_to_dict(violation.rule),
        "sqlFragment": {
            "filePath": fragment.file_path,
            "relativePath": fragment.relative_path,
            "statementId": fragment.statement_id,
            "statementType": fragment.statement_type,
            "sqlText": fragment.sql_text,
            "lineNumber": fragment.line_number,
            "namespace": fragment.namespace,
        },
        "message": violation.message,
        "suggestion": violation.suggestion,
        "exampleSql": violation.example_sql,
        "matchedText": violation.matched_text,
    }


def rule_to_dict(rule: Rule) -> dict:
    return {
        "id": rule.id,
        "name": rule.name,
        "description": rule.description,
        "severity": rule.severity.value,
        "type": rule.type.value if rule.type else None,
        "pattern": rule.pattern,
        "checkerName": rule.checker_name,
        "section": rule.section,
        "category": rule.category,
        "source": rule.source.value,
    }


def _int(data: dict, key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    return int(value)


def _blank_to_none(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _scan_time(value: object) -> str:
    if value is None:
        return ""
    # Jackson without JavaTimeModule writes LocalDateTime as [y, m, d, h, mi, s, ...]
    if isinstance(value, list) and len(value) >= 3:
        parts = [int(p) for p in value[:6]] + [0] * (6 - min(len(value), 6))
        y, mo, d, h, mi, s = parts
        return f"{y:04d}-{mo:02d}-{d:02d}T{h:02d}:{mi:02d}:{s:02d}"
    return str(value)
