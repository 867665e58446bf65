"""Shows pipeline — video catalog → latest-show fragments and feeds.

The catalog is the expensive part: recent videos are fetched once and
shared by the shows feed and both fragments, and the full history is only
fetched when feeds are being built, since feeds are its only consumer.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pressroom.content.models import Video, ViewOptions
from pressroom.integrations.youtube import VideoCatalog
from pressroom.pipeline.context import BuildContext
from pressroom.views.partition import feed_years

logger = logging.getLogger(__name__)

SECTION = "shows"


def _shows_options(ctx: BuildContext) -> ViewOptions:
    return ViewOptions(
        title=f"Web Shows - {ctx.config.site.name}",
        description=f"YouTube videos from the {ctx.config.site.name} channel.",
        section=SECTION,
        output_path=str(ctx.content_dir / SECTION),
    )


def build_recent_shows(ctx: BuildContext, videos: list[Video]) -> list[Path]:
    """Shows feed plus the latest-show widget and landing-page include."""
    views = ctx.views
    written = views.generate_feeds([v.to_content_item() for v in videos], _shows_options(ctx))

    context = {"video": videos[0] if videos else None, "site": ctx.config.site}
    written.append(
        views.render_template(
            "shows/latest.html",
            context,
            ctx.content_dir / "_shared" / "latest_show.html",
        )
    )
    written.append(
        views.render_template(
            "landing-page/latest-show.html",
            context,
            ctx.content_dir / "_index-latest-show.html",
        )
    )
    return written


def build_yearly_show_feeds(ctx: BuildContext, catalog: VideoCatalog) -> list[Path]:
    """One feed per year of video history, from ``min_feed_date`` on."""
    videos_by_year = catalog.get_all_videos_by_year()
    options = _shows_options(ctx)
    written: list[Path] = []
    for year in feed_years(videos_by_year, ctx.min_feed_date):
        written += ctx.views.generate_feeds(
            videos_by_year[year],
            options.derive(
                year=year,
                output_path=str(ctx.content_dir / SECTION / year),
                title=f"Web Shows ({year}) - {ctx.config.site.name}",
            ),
        )
    return written


def build_shows(ctx: BuildContext, catalog: VideoCatalog) -> list[Path]:
    """Fetch recent videos, render fragments and feeds, then the yearly feeds.

    Raises:
        FetchError: If the catalog cannot be read.
    """
    logger.info("Generating recent videos...")
    videos = catalog.get_videos(ctx.config.build.build_type)
    written = build_recent_shows(ctx, videos)

    if not ctx.build_rss:
        logger.info("Skipping video history (build_rss is off)")
        return written

    logger.info("Generating historical RSS/ATOM video feeds...")
    written += build_yearly_show_feeds(ctx, catalog)
    return written
