"""Tests for the pagination cursor and paged views."""

from __future__ import annotations

from sqlaudit.report.grouping import group_by_file
from sqlaudit.report.models import Severity
from sqlaudit.report.pagination import PAGE_SIZE, Pagination, flatten, paginate


def _groups(make_violation, sizes: dict[str, int]):
    violations = []
    line = 1
    for path, count in sizes.items():
        for _ in range(count):
            violations.append(make_violation(path, Severity.ERROR, line))
            line += 1
    return group_by_file(violations)


def test_defaults():
    p = Pagination()
    assert p.page == 1
    assert p.page_size == PAGE_SIZE == 50
    assert p.visible_count == 50


def test_advance_returns_next_page():
    p = Pagination()
    nxt = p.advance()
    assert nxt.page == 2
    assert nxt.visible_count == 100
    assert p.page == 1


def test_reset():
    assert Pagination(page=4).reset() == Pagination()


def test_flatten_preserves_order(make_violation):
    groups = _groups(make_violation, {"a.xml": 2, "b.xml": 1})
    pairs = flatten(groups)
    assert [p for p, _ in pairs] == ["a.xml", "a.xml", "b.xml"]
    assert [v.sql_fragment.line_number for _, v in pairs] == [1, 2, 3]


def test_prefix_and_has_more(make_violation):
    groups = _groups(make_violation, {"a.xml": 30, "b.xml": 30, "c.xml": 10})
    view = paginate(groups, Pagination())
    assert view.total == 70
    assert view.shown == 50
    assert view.has_more
    assert view.remaining == 20
    # b.xml is cut in the middle, c.xml falls entirely beyond the prefix
    assert list(view.groups) == ["a.xml", "b.xml"]
    assert len(view.groups["a.xml"]) == 30
    assert len(view.groups["b.xml"]) == 20


def test_advancing_never_hides_visible_items(make_violation):
    groups = _groups(make_violation, {"a.xml": 60, "b.xml": 60})
    p = Pagination()
    previous = []
    previous_count = 0
    for _ in range(4):
        view = paginate(groups, p)
        current = [v for vs in view.groups.values() for v in vs]
        assert current[: len(previous)] == previous
        assert view.shown >= previous_count
        previous, previous_count = current, view.shown
        p = p.advance()


def test_full_set_visible_when_exhausted(make_violation):
    groups = _groups(make_violation, {"a.xml": 50, "b.xml": 25})
    view = paginate(groups, Pagination(page=2))
    assert view.shown == view.total == 75
    assert not view.has_more
    assert paginate(groups, Pagination(page=5)).shown == 75


def test_exact_page_boundary(make_violation):
    groups = _groups(make_violation, {"a.xml": 50})
    view = paginate(groups, Pagination())
    assert view.shown == 50
    assert not view.has_more


def test_empty_groups():
    view = paginate({}, Pagination())
    assert view.groups == {}
    assert view.total == 0
    assert not view.has_more
