"""Report data models — immutable dataclasses for one scan result."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Severity(enum.Enum):
    """Rule severity level."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class RuleSource(enum.Enum):
    """Where a rule came from."""

    DEFAULT = "DEFAULT"
    CUSTOM = "CUSTOM"


class RuleType(enum.Enum):
    """How the analysis service evaluates a rule."""

    REGEX = "REGEX"
    BUILT_IN = "BUILT_IN"


@dataclass(frozen=True)
class Rule:
    """A named compliance requirement."""

    name: str
    severity: Severity
    source: RuleSource = RuleSource.DEFAULT
    id: str | None = None
    section: str | None = None
    category: str | None = None
    description: str | None = None
    type: RuleType | None = None
    pattern: str | None = None
    checker_name: str | None = None


@dataclass(frozen=True)
class SqlFragment:
    """A located piece of SQL subject to rule checks."""

    relative_path: str
    statement_type: str = ""
    statement_id: str = ""
    line_number: int = 0
    sql_text: str = ""
    file_path: str | None = None
    namespace: str | None = None


@dataclass(frozen=True)
class Violation:
    """One detected breach of a rule within a SQL fragment."""

    rule: Rule
    sql_fragment: SqlFragment
    message: str
    matched_text: str | None = None
    suggestion: str | None = None
    example_sql: str | None = None


@dataclass(frozen=True)
class ScanReport:
    """Top-level result of one scan run."""

    total_files: int = 0
    total_statements: int = 0
    total_violations: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    scan_time: str = ""
    repo_path: str | None = None
    limit_reached: bool = False
    notices: tuple[str, ...] = ()
    scanned_files: tuple[str, ...] = ()
    violations: tuple[Violation, ...] = ()

    @property
    def is_sql_upload(self) -> bool:
        """True for ad-hoc SQL-file scans, which carry no repository path."""
        return not self.repo_path
