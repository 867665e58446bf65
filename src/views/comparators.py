"""Orderings over ContentItem.

Each comparator is a ``cmp``-style function and a strict total order on a
collection with unique paths: the primary key decides, missing dates count
as older than any date, and remaining ties fall back to ``path``. The
comparators are direction-agnostic (ascending); callers that want the newest
items first pass ``newest_first=True`` to ``sort_items``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from functools import cmp_to_key

from pressroom.content.models import ContentItem

Comparator = Callable[[ContentItem, ContentItem], int]


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _date_key(value: datetime | None) -> tuple[int, datetime]:
    # (0, min) sorts before every present date.
    if value is None:
        return (0, datetime.min)
    return (1, value)


def published_comparator(a: ContentItem, b: ContentItem) -> int:
    """Order by ``published_date`` ascending, then by path."""
    return _cmp(_date_key(a.published_date), _date_key(b.published_date)) or _cmp(
        a.path, b.path
    )


def _last_updated(item: ContentItem) -> datetime | None:
    return item.updated_date or item.published_date


def updated_comparator(a: ContentItem, b: ContentItem) -> int:
    """Order by last update ascending, then by path.

    A page that was never updated counts as updated when it was published.
    """
    return _cmp(_date_key(_last_updated(a)), _date_key(_last_updated(b))) or _cmp(
        a.path, b.path
    )


def featured_comparator(a: ContentItem, b: ContentItem) -> int:
    """Featured items first, then most recently updated, then by path.

    Unlike the date comparators this is already the final "hero" order for
    landing pages; sort with it ascending.
    """
    if a.featured != b.featured:
        return -1 if a.featured else 1
    return _cmp(_date_key(_last_updated(b)), _date_key(_last_updated(a))) or _cmp(
        a.path, b.path
    )


def _directed(comparator: Comparator, newest_first: bool) -> Comparator:
    if not newest_first:
        return comparator
    return lambda a, b: comparator(b, a)


def sort_items(
    items: Iterable[ContentItem],
    comparator: Comparator,
    *,
    newest_first: bool = False,
) -> list[ContentItem]:
    """Return a new list sorted by ``comparator``; the input is untouched."""
    return sorted(items, key=cmp_to_key(_directed(comparator, newest_first)))


def is_sorted(
    items: Sequence[ContentItem],
    comparator: Comparator,
    *,
    newest_first: bool = False,
) -> bool:
    """Check that ``items`` already follow ``comparator`` in the given direction."""
    directed = _directed(comparator, newest_first)
    return all(directed(items[i], items[i + 1]) <= 0 for i in range(len(items) - 1))


COMPARATORS: dict[str, Comparator] = {
    "published": published_comparator,
    "updated": updated_comparator,
    "featured": featured_comparator,
}
