"""Incremental disclosure of a grouped violation list."""

from __future__ import annotations

from dataclasses import dataclass

from sqlaudit.report.models import Violation

PAGE_SIZE = 50


@dataclass(frozen=True)
class Pagination:
    """Pagination cursor: how many pages of the flattened list are visible."""

    page: int = 1
    page_size: int = PAGE_SIZE

    @property
    def visible_count(self) -> int:
        return self.page * self.page_size

    def advance(self) -> Pagination:
        """Return the cursor one page further along."""
        return Pagination(page=self.page + 1, page_size=self.page_size)

    def reset(self) -> Pagination:
        return Pagination(page=1, page_size=self.page_size)


@dataclass(frozen=True)
class PageView:
    """The visible slice of a grouping, re-partitioned per file."""

    groups: dict[str, list[Violation]]
    shown: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.shown < self.total

    @property
    def remaining(self) -> int:
        return self.total - self.shown


def flatten(groups: dict[str, list[Violation]]) -> list[tuple[str, Violation]]:
    """Flatten groups into (path, violation) pairs, group order then intra-group order."""
    return [(path, v) for path, violations in groups.items() for v in violations]


def paginate(groups: dict[str, list[Violation]], pagination: Pagination) -> PageView:
    """Expose the first ``visible_count`` violations, regrouped by file.

    A file whose violations all fall beyond the prefix is absent from the view.
    """
    pairs = flatten(groups)
    visible = pairs[: min(pagination.visible_count, len(pairs))]

    regrouped: dict[str, list[Violation]] = {}
    for path, v in visible:
        regrouped.setdefault(path, []).append(v)

    return PageView(groups=regrouped, shown=len(visible), total=len(pairs))
