"""Tests for src/config.py — PressroomConfig, TOML loading, env vars, CLI overrides."""

from pathlib import Path

import pytest

from pressroom.config import PressroomConfig, SiteConfig, load_config, merge_cli_overrides

ENV_VARS = (
    "PRESSROOM_CONTENT_DIR",
    "PRESSROOM_TEMPLATES_DIR",
    "PRESSROOM_DATA_DIR",
    "PRESSROOM_BUILD_RSS",
    "PRESSROOM_MIN_FEED_DATE",
    "PRESSROOM_BUILD_TYPE",
    "YOUTUBE_API_KEY",
    "YOUTUBE_CHANNEL_ID",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove env vars that _apply_env_vars reads so tests see TOML values."""
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TestPressroomConfigDefaults:
    def test_default_paths(self):
        cfg = PressroomConfig()
        assert cfg.paths.content_dir == Path("src/content/en")
        assert cfg.paths.templates_dir is None
        assert cfg.paths.data_dir == Path("src/data")

    def test_default_build(self):
        cfg = PressroomConfig()
        assert cfg.build.build_rss is True
        assert cfg.build.min_feed_date == 2017
        assert cfg.build.build_type == "development"

    def test_youtube_not_configured(self):
        assert PressroomConfig().youtube.is_configured is False


class TestSiteConfig:
    def test_section_url(self):
        site = SiteConfig(base_url="https://example.com/", url_prefix="/web")
        assert site.section_url("updates", "2021") == "https://example.com/web/updates/2021"

    def test_empty_parts_skipped(self):
        site = SiteConfig(base_url="https://example.com", url_prefix="/web")
        assert site.section_url("shows", "") == "https://example.com/web/shows"


class TestLoadConfig:
    def test_explicit_toml(self, tmp_path: Path):
        toml = tmp_path / "pressroom.toml"
        toml.write_text(
            '[paths]\ncontent = "site/en"\n\n'
            "[build]\nbuild_rss = false\nmin_feed_date = 2019\n\n"
            '[youtube]\napi_key = "k"\nchannel_id = "c"\n',
            encoding="utf-8",
        )
        cfg = load_config(toml)
        assert cfg.paths.content == "site/en"
        assert cfg.build.build_rss is False
        assert cfg.build.min_feed_date == 2019
        assert cfg.youtube.is_configured is True

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        cfg = load_config(tmp_path / "nope.toml")
        assert cfg == PressroomConfig()

    def test_invalid_toml_uses_defaults(self, tmp_path: Path):
        toml = tmp_path / "bad.toml"
        toml.write_text("[paths\n", encoding="utf-8")
        assert load_config(toml) == PressroomConfig()

    def test_searches_cwd(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".pressroom.toml").write_text('[build]\nbuild_type = "production"\n')
        monkeypatch.chdir(tmp_path)
        assert load_config().build.build_type == "production"

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        toml = tmp_path / "pressroom.toml"
        toml.write_text("[build]\nbuild_rss = true\nmin_feed_date = 2019\n", encoding="utf-8")
        monkeypatch.setenv("PRESSROOM_BUILD_RSS", "false")
        monkeypatch.setenv("PRESSROOM_MIN_FEED_DATE", "2020")
        monkeypatch.setenv("PRESSROOM_CONTENT_DIR", "/srv/content")
        monkeypatch.setenv("YOUTUBE_API_KEY", "env-key")

        cfg = load_config(toml)

        assert cfg.build.build_rss is False
        assert cfg.build.min_feed_date == 2020
        assert cfg.paths.content == "/srv/content"
        assert cfg.youtube.api_key == "env-key"


class TestMergeCliOverrides:
    def test_overrides_only_provided_values(self):
        base = PressroomConfig()
        cfg = merge_cli_overrides(
            base, content_dir="other", build_rss=False, min_feed_date=None, build_type=None
        )
        assert cfg.paths.content == "other"
        assert cfg.build.build_rss is False
        assert cfg.build.min_feed_date == 2017
        assert base.paths.content == "src/content/en"

    def test_unknown_keys_ignored(self):
        cfg = merge_cli_overrides(PressroomConfig(), verbose=True)
        assert cfg == PressroomConfig()
