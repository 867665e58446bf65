"""Year and month derivation, and the year partition.

This module is the single place that decides which year (and month) an
item belongs to, so listing pages, TOCs, and feeds never disagree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from pressroom.content.models import UNKNOWN_YEAR, ContentItem, YearBuckets

logger = logging.getLogger(__name__)


def _reference_date(item: ContentItem) -> datetime | None:
    return item.published_date or item.updated_date


def year_of(item: ContentItem) -> str:
    """Four-digit year of the publish date, else the update date, else ``"unknown"``."""
    ref = _reference_date(item)
    if ref is None:
        return UNKNOWN_YEAR
    return f"{ref.year:04d}"


def month_of(item: ContentItem) -> int | None:
    ref = _reference_date(item)
    return ref.month if ref is not None else None


def split_by_year(items: Iterable[ContentItem]) -> YearBuckets:
    """Partition items by year, keeping their relative order inside each bucket.

    Items without any date go to the ``"unknown"`` bucket instead of being
    dropped.
    """
    buckets: YearBuckets = {}
    for item in items:
        buckets.setdefault(year_of(item), []).append(item)
    if UNKNOWN_YEAR in buckets:
        logger.warning(
            "%d item(s) have no published or updated date: %s",
            len(buckets[UNKNOWN_YEAR]),
            ", ".join(i.path for i in buckets[UNKNOWN_YEAR]),
        )
    return buckets


def dated_years(buckets: YearBuckets) -> list[str]:
    """Numeric years present in ``buckets``, newest first."""
    return sorted((y for y in buckets if y != UNKNOWN_YEAR), reverse=True)


def feed_years(buckets: YearBuckets, min_feed_date: int) -> list[str]:
    """Years that get a year-sliced feed: numeric and ``>= min_feed_date``."""
    return [y for y in dated_years(buckets) if int(y) >= min_feed_date]
