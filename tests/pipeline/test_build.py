"""Tests for the build orchestrator."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pressroom.config import (
    BuildSectionConfig,
    PathsConfig,
    PressroomConfig,
    YouTubeSectionConfig,
)
from pressroom.integrations.youtube import YouTubeCatalog
from pressroom.pipeline.build import DEFAULT_STEPS, available_steps, build
from pressroom.pipeline.context import BuildContext
from pressroom.shared.errors import FetchError


def _ctx(tmp_path: Path) -> BuildContext:
    content = tmp_path / "content"
    for section in ("fundamentals", "showcase", "tools", "updates", "site-kit"):
        (content / section).mkdir(parents=True)
    page = content / "tools" / "devtools.md"
    page.write_text("---\ntitle: DevTools\npublished_on: 2021-02-03\n---\nBody\n", encoding="utf-8")
    data = tmp_path / "data"
    data.mkdir()
    (data / "announcement.yaml").write_text("enabled: false\n", encoding="utf-8")
    config = PressroomConfig(
        paths=PathsConfig(content=str(content), data=str(data)),
        build=BuildSectionConfig(build_rss=True, min_feed_date=2020),
    )
    return BuildContext.from_config(config)


def _make_catalog() -> MagicMock:
    catalog = MagicMock()
    catalog.get_videos.return_value = []
    catalog.get_all_videos_by_year.return_value = {}
    return catalog


class TestBuild:
    def test_all_steps_succeed(self, tmp_path: Path):
        ctx = _ctx(tmp_path)

        report = build(ctx, catalog=_make_catalog())

        assert not report.has_errors
        assert set(report.written) == set(DEFAULT_STEPS)
        assert str(ctx.content_dir / "tools" / "2021" / "rss.xml") in report.written["tools"]

    def test_failing_step_does_not_stop_siblings(self, tmp_path: Path):
        ctx = _ctx(tmp_path)
        catalog = _make_catalog()
        catalog.get_videos.side_effect = FetchError("quota exceeded")

        report = build(ctx, ["tools", "shows", "updates"], catalog=catalog)

        assert report.has_errors
        assert [e.step for e in report.errors] == ["shows"]
        assert "quota exceeded" in report.errors[0].message
        assert (ctx.content_dir / "tools" / "rss.xml").exists()
        assert (ctx.content_dir / "updates" / "rss.xml").exists()
        assert "1 error(s)" in report.summary()

    def test_catalog_read_timeout_is_reported(self, tmp_path: Path):
        ctx = _ctx(tmp_path)
        catalog = YouTubeCatalog(YouTubeSectionConfig(api_key="k", channel_id="UC1"))
        mock_response = MagicMock()
        mock_response.read.side_effect = TimeoutError("The read operation timed out")
        mock_response.__enter__ = lambda s: s
        mock_response.__exit__ = MagicMock(return_value=False)

        with patch("urllib.request.urlopen", return_value=mock_response):
            report = build(ctx, ["tools", "shows"], catalog=catalog)

        assert [e.step for e in report.errors] == ["shows"]
        assert (ctx.content_dir / "tools" / "rss.xml").exists()

    def test_write_failure_is_reported(self, tmp_path: Path):
        ctx = _ctx(tmp_path)

        with patch(
            "pressroom.pipeline.build.propagate_announcement",
            side_effect=PermissionError("read-only file system"),
        ):
            report = build(ctx, ["announcement", "tools"])

        assert [e.step for e in report.errors] == ["announcement"]
        assert "read-only" in report.errors[0].message
        assert "tools" in report.written

    def test_missing_section_directory_is_reported(self, tmp_path: Path):
        ctx = _ctx(tmp_path)
        (ctx.content_dir / "site-kit").rmdir()

        report = build(ctx, ["site-kit", "tools"])

        assert [e.step for e in report.errors] == ["site-kit"]
        assert "tools" in report.written

    def test_unknown_step_rejected_before_running(self, tmp_path: Path):
        ctx = _ctx(tmp_path)

        with pytest.raises(ValueError, match="nope"):
            build(ctx, ["tools", "nope"])

        assert not (ctx.content_dir / "tools" / "rss.xml").exists()

    def test_default_catalog_is_youtube(self, tmp_path: Path):
        ctx = _ctx(tmp_path)

        with patch("pressroom.pipeline.build.YouTubeCatalog") as youtube:
            youtube.return_value = _make_catalog()
            report = build(ctx, ["shows"])

        youtube.assert_called_once_with(ctx.config.youtube)
        assert not report.has_errors

    def test_available_steps_is_a_copy(self):
        steps = available_steps()
        steps.append("extra")
        assert "extra" not in available_steps()
