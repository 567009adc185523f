"""View state for a loaded report — one immutable record, one pure function per action.

Every transition returns the next full state; nothing is mutated in place,
so a report swap can never leave a stale filter or pagination cursor behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from sqlaudit.report.grouping import SeverityFilter, group_by_file
from sqlaudit.report.models import ScanReport
from sqlaudit.report.pagination import PageView, Pagination, paginate


@dataclass(frozen=True)
class ViewState:
    """Current report, active severity filter, and pagination cursor."""

    report: ScanReport | None = None
    severity_filter: SeverityFilter = SeverityFilter.ALL
    pagination: Pagination = field(default_factory=Pagination)

    @property
    def has_report(self) -> bool:
        return self.report is not None


def load(state: ViewState, report: ScanReport) -> ViewState:
    """A new report replaces the old one and resets filter and cursor."""
    return ViewState(
        report=report,
        pagination=state.pagination.reset(),
    )


def change_filter(state: ViewState, severity_filter: SeverityFilter) -> ViewState:
    """Switching filters always restarts at the first page."""
    return replace(
        state,
        severity_filter=severity_filter,
        pagination=state.pagination.reset(),
    )


def advance_page(state: ViewState) -> ViewState:
    return replace(state, pagination=state.pagination.advance())


def clear(state: ViewState) -> ViewState:
    return ViewState(pagination=state.pagination.reset())


def visible(state: ViewState) -> PageView:
    """Group, filter and paginate the current report."""
    if state.report is None:
        return PageView(groups={}, shown=0, total=0)
    groups = group_by_file(state.report.violations, state.severity_filter)
    return paginate(groups, state.pagination)
