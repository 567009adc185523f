"""Group violations by source file and filter them by severity."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from sqlaudit.report.models import Rule, RuleSource, ScanReport, Severity, Violation

# Grouping key for violations whose fragment carries no path
UNKNOWN_PATH = "unknown"

OTHER_CATEGORY = "Other"


class SeverityFilter(enum.Enum):
    """Which severities the violation list currently shows."""

    ALL = "ALL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def accepts(self, severity: Severity) -> bool:
        return self is SeverityFilter.ALL or self.value == severity.value


def group_by_file(
    violations: Iterable[Violation],
    severity_filter: SeverityFilter = SeverityFilter.ALL,
) -> dict[str, list[Violation]]:
    """Partition violations by relative path, keeping report order.

    Groups appear in order of their first violation. Groups left empty by the
    filter are dropped, so an empty result means either a clean report or a
    filter that excludes everything; use ``total_violations`` to tell them apart.
    """
    grouped: dict[str, list[Violation]] = {}
    for v in violations:
        if not severity_filter.accepts(v.rule.severity):
            continue
        grouped.setdefault(fragment_path(v), []).append(v)
    return grouped


def fragment_path(violation: Violation) -> str:
    path = violation.sql_fragment.relative_path
    return path if path.strip() else UNKNOWN_PATH


@dataclass(frozen=True)
class SeverityCounts:
    """Counts shown on the filter controls."""

    all: int
    error: int
    warning: int
    info: int

    @property
    def offers_info(self) -> bool:
        """The INFO filter is only offered when there is something to show."""
        return self.info > 0

    def for_filter(self, severity_filter: SeverityFilter) -> int:
        return {
            SeverityFilter.ALL: self.all,
            SeverityFilter.ERROR: self.error,
            SeverityFilter.WARNING: self.warning,
            SeverityFilter.INFO: self.info,
        }[severity_filter]


def severity_counts(report: ScanReport) -> SeverityCounts:
    return SeverityCounts(
        all=report.total_violations,
        error=report.error_count,
        warning=report.warning_count,
        info=report.info_count,
    )


def group_rules_by_category(
    rules: Iterable[Rule],
) -> tuple[dict[str, list[Rule]], list[Rule]]:
    """Split rules into category groups of default rules plus the custom rules.

    Returns ``(categories, custom_rules)``; both keep the input order.
    """
    categories: dict[str, list[Rule]] = {}
    custom: list[Rule] = []
    for rule in rules:
        if rule.source is RuleSource.CUSTOM:
            custom.append(rule)
            continue
        categories.setdefault(rule.category or OTHER_CATEGORY, []).append(rule)
    return categories, custom
