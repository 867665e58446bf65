"""View layer — comparators, the year partition, renderers, and generators.

Generators consume items in caller-chosen order::

    items = sort_items(items, updated_comparator, newest_first=True)
    views.generate_feeds(items, options)
"""

from pressroom.views.comparators import (
    COMPARATORS,
    Comparator,
    featured_comparator,
    is_sorted,
    published_comparator,
    sort_items,
    updated_comparator,
)
from pressroom.views.generators import ViewGenerators
from pressroom.views.partition import feed_years, month_of, split_by_year, year_of
from pressroom.views.render import TemplateRenderer, slugify

__all__ = [
    "COMPARATORS",
    "Comparator",
    "TemplateRenderer",
    "ViewGenerators",
    "featured_comparator",
    "feed_years",
    "is_sorted",
    "month_of",
    "published_comparator",
    "slugify",
    "sort_items",
    "split_by_year",
    "updated_comparator",
    "year_of",
]
