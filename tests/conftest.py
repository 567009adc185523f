"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from sqlaudit.report.loader import load_report_file
from sqlaudit.report.models import (
    Rule,
    ScanReport,
    Severity,
    SqlFragment,
    Violation,
)


def _make_violation(
    path: str = "mapper/UserMapper.xml",
    severity: Severity = Severity.ERROR,
    line: int = 1,
    name: str = "Avoid SELECT *",
    example_sql: str | None = None,
    sql_text: str = "SELECT * FROM users",
) -> Violation:
    return Violation(
        rule=Rule(name=name, severity=severity),
        sql_fragment=SqlFragment(
            relative_path=path,
            statement_type="select",
            statement_id=f"stmt{line}",
            line_number=line,
            sql_text=sql_text,
        ),
        message=f"{name} at line {line}",
        example_sql=example_sql,
    )


def _make_report(violations: list[Violation], **kwargs) -> ScanReport:
    counts = {
        s: sum(1 for v in violations if v.rule.severity is s) for s in Severity
    }
    fields = dict(
        total_files=len({v.sql_fragment.relative_path for v in violations}),
        total_statements=len(violations),
        total_violations=len(violations),
        error_count=counts[Severity.ERROR],
        warning_count=counts[Severity.WARNING],
        info_count=counts[Severity.INFO],
        scan_time="2026-10-18T14:03:22",
        repo_path="/work/repo",
        scanned_files=tuple(
            dict.fromkeys(v.sql_fragment.relative_path for v in violations)
        ),
        violations=tuple(violations),
    )
    fields.update(kwargs)
    return ScanReport(**fields)


@pytest.fixture
def make_violation():
    return _make_violation


@pytest.fixture
def make_report():
    return _make_report


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_report_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sample_report.json"


@pytest.fixture
def sample_report(sample_report_path: Path) -> ScanReport:
    return load_report_file(sample_report_path)


@pytest.fixture
def clean_report() -> ScanReport:
    return _make_report(
        [],
        total_files=2,
        total_statements=7,
        scanned_files=("a.xml", "b.xml"),
    )
