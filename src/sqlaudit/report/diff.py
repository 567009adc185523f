"""Line-aligned comparison between an original SQL fragment and its suggested rewrite.

The comparison is positional: row *i* pairs line *i* of each side. No
insertion/deletion realignment is attempted, so an inserted line marks every
following row as changed. It assumes rewrites keep roughly the same line
layout as the original.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from sqlaudit.report.grouping import fragment_path
from sqlaudit.report.models import Violation


@dataclass(frozen=True)
class DiffRow:
    """One aligned row of the compare view; ``number`` labels both panels."""

    number: int
    left: str
    right: str
    changed: bool


def split_lines(text: str | None) -> list[str]:
    """Normalize CRLF / CR to LF and split. Empty input yields no lines."""
    if not text:
        return []
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def compare(original_sql: str | None, example_sql: str | None) -> list[DiffRow]:
    left = split_lines(original_sql)
    right = split_lines(example_sql)

    rows: list[DiffRow] = []
    for i in range(max(len(left), len(right))):
        left_cell = left[i] if i < len(left) else ""
        right_cell = right[i] if i < len(right) else ""
        rows.append(
            DiffRow(
                number=i + 1,
                left=left_cell,
                right=right_cell,
                changed=left_cell.rstrip() != right_cell.rstrip(),
            )
        )
    return rows


def changed_count(rows: list[DiffRow]) -> int:
    return sum(1 for r in rows if r.changed)


def compare_target_id(violation: Violation) -> str:
    """Stable identifier for a violation's compare view.

    Hash of path, statement, line, rule and example SQL. Collisions are not
    handled.
    """
    fragment = violation.sql_fragment
    key = "|".join(
        (
            fragment_path(violation),
            fragment.statement_id,
            str(fragment.line_number),
            violation.rule.id or violation.rule.name,
            violation.example_sql or "",
        )
    )
    return "cmp-" + hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]
