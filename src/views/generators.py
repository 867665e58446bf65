"""View generators — (items, options) → rendered files.

Every generator takes items in the order they should appear, never sorts
or mutates them, and returns the paths it wrote. An empty collection
produces valid, empty artifacts.
"""

from __future__ import annotations

import calendar
import hashlib
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pressroom.config import SiteConfig
from pressroom.content.models import ContentItem, ViewOptions
from pressroom.shared.errors import RenderError, UnsortedItemsError
from pressroom.views.comparators import Comparator, is_sorted, published_comparator, sort_items
from pressroom.views.feeds import FeedMeta, feed_updated, render_atom, render_rss
from pressroom.views.partition import feed_years, month_of, split_by_year
from pressroom.views.render import TemplateRenderer, _atomic_write, slugify

logger = logging.getLogger(__name__)

YEARLY_FEED_MAX_ITEMS = 500

LISTING_TEMPLATE = "listing.md"
TAG_TEMPLATE = "tag.md"
TOC_TEMPLATE = "toc.yaml"
WIDGET_TEMPLATE = "latest-articles.html"


def tag_slugs(tags: Iterable[str]) -> dict[str, str]:
    """File stem for each tag, unique across ``tags``.

    Tags that slugify to the same stem, or to nothing, all get a short
    digest of the tag appended so no page overwrites another.
    """
    by_slug: dict[str, list[str]] = {}
    for tag in tags:
        by_slug.setdefault(slugify(tag), []).append(tag)

    stems: dict[str, str] = {}
    for slug, group in by_slug.items():
        if len(group) == 1 and slug != "untitled":
            stems[group[0]] = slug
            continue
        for tag in group:
            digest = hashlib.sha1(tag.encode("utf-8")).hexdigest()[:8]
            stems[tag] = f"{slug}-{digest}"
    return stems


class ViewGenerators:
    """The view primitives bound to one renderer and one feed switch."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        *,
        build_rss: bool = True,
        site: SiteConfig | None = None,
    ) -> None:
        self.renderer = renderer
        self.build_rss = build_rss
        self.site = site or SiteConfig()

    # ── Primitive ────────────────────────────────────────────────

    def render_template(
        self, template: str, context: dict[str, Any], output_file: Path
    ) -> Path:
        return self.renderer.render_template(template, context, output_file)

    def _context(self, items: Sequence[ContentItem], options: ViewOptions) -> dict[str, Any]:
        return {
            "title": options.title,
            "description": options.description,
            "section": options.section,
            "year": options.year,
            "articles": list(items),
            "site": self.site,
        }

    # ── Feeds ────────────────────────────────────────────────────

    def generate_feeds(self, items: Sequence[ContentItem], options: ViewOptions) -> list[Path]:
        """Write ``rss.xml`` and ``atom.xml`` for ``items`` in the given order.

        Returns an empty list without writing anything when feeds are disabled.
        """
        if not self.build_rss:
            logger.debug("Skipping feeds for %s (build_rss is off)", options.output_path)
            return []

        entries = list(items)
        if options.max_items is not None:
            entries = entries[: options.max_items]
        if not options.include_content:
            entries = [item.without_content() for item in entries]

        out_dir = Path(options.output_path)
        link = self.site.section_url(options.section, options.year or "")
        updated = feed_updated(entries)
        written: list[Path] = []
        for filename, serialize in (("rss.xml", render_rss), ("atom.xml", render_atom)):
            meta = FeedMeta(
                title=options.title,
                description=options.description,
                link=link,
                feed_url=f"{link}/{filename}",
                author=self.site.author,
                updated=updated,
            )
            path = out_dir / filename
            try:
                _atomic_write(path, serialize(entries, meta))
            except OSError as exc:
                raise RenderError(filename, path, str(exc)) from exc
            written.append(path)
        logger.info("Wrote %d-entry feeds to %s", len(entries), out_dir)
        return written

    def generate_feeds_for_every_year(
        self,
        items: Sequence[ContentItem],
        options: ViewOptions,
        min_feed_date: int,
    ) -> list[Path]:
        """Write one summary-only feed per year from ``min_feed_date`` on.

        Each year is sorted newest-published first so annual feeds do not
        churn when older pages are edited.
        """
        if not self.build_rss:
            return []

        buckets = split_by_year(items)
        written: list[Path] = []
        for year in feed_years(buckets, min_feed_date):
            year_items = sort_items(buckets[year], published_comparator, newest_first=True)
            year_options = options.derive(
                year=year,
                output_path=str(Path(options.output_path) / year),
                title=f"{options.title} ({year})",
                include_content=False,
                max_items=YEARLY_FEED_MAX_ITEMS,
            )
            written.extend(self.generate_feeds(year_items, year_options))
        return written

    # ── Pages ────────────────────────────────────────────────────

    def generate_index(self, items: Sequence[ContentItem], options: ViewOptions) -> list[Path]:
        """Render a landing page from ``options.template``.

        The output file is named after the template (``showcase/index.yaml``
        becomes ``<output_path>/index.yaml``).
        """
        if not options.template:
            raise ValueError("generate_index needs options.template")
        articles = list(items)
        if options.max_items is not None:
            articles = articles[: options.max_items]
        out = Path(options.output_path) / Path(options.template).name
        return [self.render_template(options.template, self._context(articles, options), out)]

    def generate_list_page(self, items: Sequence[ContentItem], options: ViewOptions) -> list[Path]:
        template = options.template or LISTING_TEMPLATE
        out = Path(options.output_path) / "index.md"
        return [self.render_template(template, self._context(items, options), out)]

    def generate_tag_pages(self, items: Sequence[ContentItem], options: ViewOptions) -> list[Path]:
        """One page per distinct tag, listing the items carrying it.

        Items without tags appear on no page.
        """
        by_tag: dict[str, list[ContentItem]] = {}
        for item in items:
            for tag in item.tags:
                by_tag.setdefault(tag, []).append(item)

        template = options.template or TAG_TEMPLATE
        out_dir = Path(options.output_path)
        written: list[Path] = []
        stems = tag_slugs(by_tag)
        for tag in sorted(by_tag):
            tag_options = options.derive(title=f"{options.title}: {tag}")
            context = self._context(by_tag[tag], tag_options)
            context["tag"] = tag
            written.append(self.render_template(template, context, out_dir / f"{stems[tag]}.md"))
        logger.info("Wrote %d tag page(s) to %s", len(written), out_dir)
        return written

    def generate_toc_by_month(
        self, items: Sequence[ContentItem], options: ViewOptions
    ) -> list[Path]:
        """Table of contents for one year, newest month first."""
        by_month: dict[int, list[ContentItem]] = {}
        for item in items:
            month = month_of(item)
            if month is None:
                logger.warning("No date for %s; left out of the %s TOC", item.path, options.year)
                continue
            by_month.setdefault(month, []).append(item)

        months = [
            {"number": m, "name": calendar.month_name[m], "articles": by_month[m]}
            for m in sorted(by_month, reverse=True)
        ]
        context = self._context(items, options)
        context["months"] = months
        out = Path(options.output_path) / "_toc.yaml"
        return [self.render_template(TOC_TEMPLATE, context, out)]

    def generate_latest_widget(
        self,
        items: Sequence[ContentItem],
        options: ViewOptions,
        *,
        ordered_by: Comparator,
        newest_first: bool = True,
    ) -> list[Path]:
        """Render the first ``articles_to_show`` items as a widget fragment.

        ``ordered_by`` names the order the caller already applied; this
        generator checks it and slices, it does not sort.

        Raises:
            UnsortedItemsError: If ``items`` are not in the declared order.
        """
        if not is_sorted(items, ordered_by, newest_first=newest_first):
            raise UnsortedItemsError(
                f"Items for the latest widget in {options.output_path} are not sorted "
                f"by {getattr(ordered_by, '__name__', ordered_by)}"
            )
        head = list(items[: options.articles_to_show])
        template = options.template or WIDGET_TEMPLATE
        out = Path(options.output_path) / "_shared" / "latest_articles.html"
        return [self.render_template(template, self._context(head, options), out)]
