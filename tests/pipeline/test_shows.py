"""Tests for the shows pipeline."""

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock

import feedparser
import pytest

from pressroom.config import BuildSectionConfig, PathsConfig, PressroomConfig
from pressroom.content.models import Video
from pressroom.pipeline.context import BuildContext
from pressroom.pipeline.shows import build_recent_shows, build_shows
from pressroom.shared.errors import FetchError


def _make_video(video_id: str, year: int, month: int = 1) -> Video:
    return Video(
        video_id=video_id,
        title=f"Episode {video_id}",
        description=f"About {video_id}",
        published_at=datetime(year, month, 1, tzinfo=UTC),
        thumbnail=f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
    )


def _make_catalog(recent: list[Video], history: list[Video] | None = None) -> MagicMock:
    catalog = MagicMock()
    catalog.get_videos.return_value = recent
    buckets: dict[str, list] = {}
    for video in history or []:
        buckets.setdefault(str(video.published_at.year), []).append(video.to_content_item())
    catalog.get_all_videos_by_year.return_value = buckets
    return catalog


def _ctx(tmp_path: Path, build_rss: bool = True) -> BuildContext:
    config = PressroomConfig(
        paths=PathsConfig(content=str(tmp_path / "content")),
        build=BuildSectionConfig(build_rss=build_rss, min_feed_date=2020, build_type="production"),
    )
    return BuildContext.from_config(config)


class TestBuildShows:
    def test_history_not_fetched_without_rss(self, tmp_path: Path):
        catalog = _make_catalog([_make_video("new", 2021)])

        build_shows(_ctx(tmp_path, build_rss=False), catalog)

        catalog.get_videos.assert_called_once_with("production")
        catalog.get_all_videos_by_year.assert_not_called()

    def test_fragments_written_without_rss(self, tmp_path: Path):
        catalog = _make_catalog([_make_video("new", 2021), _make_video("old", 2020)])
        ctx = _ctx(tmp_path, build_rss=False)

        written = build_shows(ctx, catalog)

        content = tmp_path / "content"
        assert written == [
            content / "_shared" / "latest_show.html",
            content / "_index-latest-show.html",
        ]
        widget = (content / "_shared" / "latest_show.html").read_text(encoding="utf-8")
        assert "Episode new" in widget
        assert "Episode old" not in widget
        assert "https://www.youtube.com/watch?v=new" in widget

    def test_feeds_with_rss(self, tmp_path: Path):
        recent = [_make_video("c", 2022), _make_video("b", 2021)]
        history = [_make_video("c", 2022), _make_video("b", 2021), _make_video("a", 2019)]
        catalog = _make_catalog(recent, history)

        build_shows(_ctx(tmp_path), catalog)

        shows = tmp_path / "content" / "shows"
        catalog.get_all_videos_by_year.assert_called_once_with()
        feed = feedparser.parse(str(shows / "rss.xml"))
        assert [e.title for e in feed.entries] == ["Episode c", "Episode b"]
        yearly = feedparser.parse(str(shows / "2021" / "atom.xml"))
        assert yearly.feed.title == "Web Shows (2021) - Google Developers"
        assert (shows / "2022" / "rss.xml").exists()
        assert not (shows / "2019").exists()

    def test_no_videos_renders_empty_fragments(self, tmp_path: Path):
        written = build_recent_shows(_ctx(tmp_path, build_rss=False), [])

        assert len(written) == 2
        assert all(p.read_text(encoding="utf-8").strip() == "" for p in written)

    def test_fetch_error_propagates(self, tmp_path: Path):
        catalog = MagicMock()
        catalog.get_videos.side_effect = FetchError("quota exceeded")

        with pytest.raises(FetchError):
            build_shows(_ctx(tmp_path), catalog)
