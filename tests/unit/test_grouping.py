"""Tests for grouping violations by file and filtering by severity."""

from __future__ import annotations

from sqlaudit.report.grouping import (
    OTHER_CATEGORY,
    UNKNOWN_PATH,
    SeverityFilter,
    group_by_file,
    group_rules_by_category,
    severity_counts,
)
from sqlaudit.report.models import Rule, RuleSource, Severity


def _mixed(make_violation):
    return [
        make_violation("a.xml", Severity.ERROR, 1),
        make_violation("b.xml", Severity.WARNING, 2),
        make_violation("a.xml", Severity.INFO, 3),
        make_violation("c.xml", Severity.ERROR, 4),
        make_violation("b.xml", Severity.ERROR, 5),
        make_violation("a.xml", Severity.WARNING, 6),
    ]


def test_groups_in_first_appearance_order(make_violation):
    grouped = group_by_file(_mixed(make_violation))
    assert list(grouped) == ["a.xml", "b.xml", "c.xml"]


def test_intra_group_order_preserved(make_violation):
    grouped = group_by_file(_mixed(make_violation))
    assert [v.sql_fragment.line_number for v in grouped["a.xml"]] == [1, 3, 6]
    assert [v.sql_fragment.line_number for v in grouped["b.xml"]] == [2, 5]


def test_all_filter_keeps_every_violation_once(make_violation):
    violations = _mixed(make_violation)
    grouped = group_by_file(violations, SeverityFilter.ALL)
    flattened = [v for vs in grouped.values() for v in vs]
    assert len(flattened) == len(violations)
    assert sorted(id(v) for v in flattened) == sorted(id(v) for v in violations)


def test_severity_filters_partition_all(make_violation):
    violations = _mixed(make_violation)
    everything = [v for vs in group_by_file(violations).values() for v in vs]

    total = 0
    for severity_filter in (
        SeverityFilter.ERROR,
        SeverityFilter.WARNING,
        SeverityFilter.INFO,
    ):
        subset = [
            v for vs in group_by_file(violations, severity_filter).values() for v in vs
        ]
        assert all(v in everything for v in subset)
        assert all(v.rule.severity.value == severity_filter.value for v in subset)
        total += len(subset)
    assert total == len(everything)


def test_empty_groups_dropped(make_violation):
    grouped = group_by_file(_mixed(make_violation), SeverityFilter.INFO)
    assert list(grouped) == ["a.xml"]


def test_no_violations_yields_empty_mapping():
    for severity_filter in SeverityFilter:
        assert group_by_file([], severity_filter) == {}


def test_source_not_mutated(make_violation):
    violations = _mixed(make_violation)
    snapshot = list(violations)
    group_by_file(violations, SeverityFilter.ERROR)
    group_by_file(violations, SeverityFilter.WARNING)
    assert violations == snapshot


def test_blank_path_grouped_as_unknown(make_violation):
    grouped = group_by_file([make_violation(path="  ")])
    assert list(grouped) == [UNKNOWN_PATH]


def test_severity_counts(sample_report):
    counts = severity_counts(sample_report)
    assert counts.for_filter(SeverityFilter.ALL) == 4
    assert counts.for_filter(SeverityFilter.ERROR) == 2
    assert counts.for_filter(SeverityFilter.WARNING) == 1
    assert counts.offers_info


def test_info_filter_hidden_without_info(make_report, make_violation):
    report = make_report([make_violation(severity=Severity.ERROR)])
    assert not severity_counts(report).offers_info


def test_group_rules_by_category():
    rules = [
        Rule(name="a", severity=Severity.ERROR, category="SELECT"),
        Rule(name="b", severity=Severity.WARNING, category="WHERE"),
        Rule(name="c", severity=Severity.INFO, source=RuleSource.CUSTOM),
        Rule(name="d", severity=Severity.ERROR, category="SELECT"),
        Rule(name="e", severity=Severity.ERROR),
    ]
    categories, custom = group_rules_by_category(rules)
    assert list(categories) == ["SELECT", "WHERE", OTHER_CATEGORY]
    assert [r.name for r in categories["SELECT"]] == ["a", "d"]
    assert [r.name for r in custom] == ["c"]
