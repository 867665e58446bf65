"""Section pipelines — discovered pages → listings, tags, TOCs, widgets, feeds.

Every section runs the same sequence; ``SectionSpec`` carries the only
per-section differences (titles, discovery patterns, which comparator
orders the pages, and which optional views are built).
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from pressroom.content.discovery import get_file_list
from pressroom.content.models import UNKNOWN_YEAR, ContentItem, ViewOptions
from pressroom.pipeline.context import BuildContext
from pressroom.views.comparators import COMPARATORS, sort_items
from pressroom.views.partition import dated_years, split_by_year

logger = logging.getLogger(__name__)

SCAFFOLD_EXCLUDES = ["!tags/*", "!**/index.md"]
LANDING_ARTICLES = 4


class FacetPage(BaseModel):
    """A listing of the whole section grouped by one metadata field."""

    model_config = ConfigDict(frozen=True)

    subdir: str
    title: str
    template: str


class SectionSpec(BaseModel):
    """What differs between section pipelines."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    description: str
    patterns: list[str] = Field(default_factory=lambda: ["**/*.md"])
    primary: str = "updated"
    feed_title: str | None = None
    index_template: str | None = None
    index_order: str | None = None
    facets: list[FacetPage] = Field(default_factory=list)
    tag_title: str | None = None
    year_title: str | None = None
    latest_widget: bool = False
    landing_template: str | None = None
    landing_output: str | None = None


def _ordered(items: list[ContentItem], comparator_name: str) -> list[ContentItem]:
    # The date comparators are ascending; sections list newest first.
    # The featured comparator already yields the landing-page order.
    return sort_items(
        items,
        COMPARATORS[comparator_name],
        newest_first=comparator_name != "featured",
    )


def discover_section(spec: SectionSpec, ctx: BuildContext) -> list[ContentItem]:
    return get_file_list(
        ctx.content_dir / spec.name,
        spec.patterns,
        url_base=ctx.config.site.section_url(spec.name),
    )


def run_section(spec: SectionSpec, ctx: BuildContext) -> list[Path]:
    """Build every view for one section.

    Returns:
        Paths of all written files.

    Raises:
        DiscoveryError: If the section directory or a page cannot be read.
        RenderError: If a view cannot be rendered.
    """
    views = ctx.views
    base = ctx.content_dir / spec.name
    options = ViewOptions(
        title=spec.title,
        description=spec.description,
        section=spec.name,
        output_path=str(base),
    )

    items = discover_section(spec, ctx)
    ordered = _ordered(items, spec.primary)
    written: list[Path] = []

    if spec.index_template:
        index_items = _ordered(items, spec.index_order) if spec.index_order else ordered
        written += views.generate_index(index_items, options.derive(template=spec.index_template))

    feed_options = options.derive(title=spec.feed_title or spec.title)
    written += views.generate_feeds(ordered, feed_options)

    for facet in spec.facets:
        written += views.generate_list_page(
            ordered,
            options.derive(
                title=facet.title,
                template=facet.template,
                output_path=str(base / facet.subdir),
            ),
        )

    if spec.tag_title:
        written += views.generate_tag_pages(
            ordered,
            options.derive(title=spec.tag_title, output_path=str(base / "tags")),
        )

    if spec.year_title:
        buckets = split_by_year(ordered)
        if UNKNOWN_YEAR in buckets:
            logger.warning(
                "%s: %d undated page(s) get no year listing",
                spec.name,
                len(buckets[UNKNOWN_YEAR]),
            )
        for year in dated_years(buckets):
            year_options = options.derive(
                year=year,
                output_path=str(base / year),
                title=f"{spec.year_title} ({year})",
            )
            written += views.generate_list_page(buckets[year], year_options)
            written += views.generate_toc_by_month(buckets[year], year_options.derive(title=year))

    if spec.latest_widget:
        written += views.generate_latest_widget(
            ordered,
            ViewOptions(
                section=spec.name,
                output_path=str(ctx.content_dir),
                articles_to_show=LANDING_ARTICLES,
            ),
            ordered_by=COMPARATORS[spec.primary],
        )

    if spec.landing_template and spec.landing_output:
        written.append(
            views.render_template(
                spec.landing_template,
                {"articles": ordered[:LANDING_ARTICLES], "site": ctx.config.site},
                ctx.content_dir / spec.landing_output,
            )
        )

    written += views.generate_feeds_for_every_year(ordered, feed_options, ctx.min_feed_date)

    logger.info("%s: %d page(s), %d file(s) written", spec.name, len(items), len(written))
    return written


SECTIONS: dict[str, SectionSpec] = {
    "fundamentals": SectionSpec(
        name="fundamentals",
        title="Web Fundamentals",
        description="The latest changes to https://developers.google.com/web/fundamentals",
    ),
    "showcase": SectionSpec(
        name="showcase",
        title="Case Studies",
        description=(
            "Learn why and how other developers have used the web "
            "to create amazing web experiences for their users."
        ),
        patterns=["**/*.md", *SCAFFOLD_EXCLUDES],
        feed_title="Show Cases",
        index_template="showcase/index.yaml",
        index_order="featured",
        facets=[
            FacetPage(subdir="region", title="Show Cases by Region", template="showcase/region.md"),
            FacetPage(
                subdir="vertical", title="Show Cases by Vertical", template="showcase/vertical.md"
            ),
        ],
        tag_title="Show Cases by Tag",
        year_title="Show Cases",
    ),
    "tools": SectionSpec(
        name="tools",
        title="Tools",
        description="The latest changes to https://developers.google.com/web/tools",
    ),
    "site-kit": SectionSpec(
        name="site-kit",
        title="Site Kit",
        description="The latest changes to https://developers.google.com/web/site-kit",
    ),
    "updates": SectionSpec(
        name="updates",
        title="Updates",
        description=(
            "The latest and freshest updates from the Web teams "
            "at Google. Chrome, V8, tooling, and more."
        ),
        patterns=["**/*.md", *SCAFFOLD_EXCLUDES],
        primary="published",
        index_template="updates/index.md",
        tag_title="Updates",
        year_title="Web Updates",
        latest_widget=True,
        landing_template="landing-page/latest-updates.html",
        landing_output="_index-latest-updates.html",
    ),
}
