"""Unified configuration loaded from .pressroom.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".pressroom.toml"
GLOBAL_CONFIG = Path.home() / ".config" / "pressroom" / "config.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]


class PathsConfig(BaseModel):
    """[paths] section."""

    content: str = "src/content/en"
    templates: str = ""
    data: str = "src/data"

    @property
    def content_dir(self) -> Path:
        return Path(self.content)

    @property
    def templates_dir(self) -> Path | None:
        return Path(self.templates) if self.templates else None

    @property
    def data_dir(self) -> Path:
        return Path(self.data)


class BuildSectionConfig(BaseModel):
    """[build] section."""

    build_rss: bool = True
    min_feed_date: int = 2017
    build_type: str = "development"


class SiteConfig(BaseModel):
    """[site] section — used for absolute URLs in feeds."""

    name: str = "Google Developers"
    base_url: str = "https://developers.google.com"
    url_prefix: str = "/web"
    author: str = ""

    def section_url(self, *parts: str) -> str:
        path = "/".join(p.strip("/") for p in (self.url_prefix, *parts) if p.strip("/"))
        return f"{self.base_url.rstrip('/')}/{path}"


class YouTubeSectionConfig(BaseModel):
    """[youtube] section."""

    api_key: str = ""
    channel_id: str = ""
    max_results: int = 25

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.channel_id)


class PressroomConfig(BaseModel):
    """Top-level configuration model for a site build."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    build: BuildSectionConfig = Field(default_factory=BuildSectionConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    youtube: YouTubeSectionConfig = Field(default_factory=YouTubeSectionConfig)


def _find_config_file() -> Path | None:
    """First existing file among ./.pressroom.toml and the per-user config."""
    candidates = [d / CONFIG_FILENAME for d in CONFIG_SEARCH_PATHS]
    candidates.append(GLOBAL_CONFIG)
    return next((c for c in candidates if c.exists()), None)


def load_config(path: str | Path | None = None) -> PressroomConfig:
    """Build the effective configuration.

    An explicit ``path`` wins; otherwise ``.pressroom.toml`` in the working
    directory, then ``~/.config/pressroom/config.toml``. Environment
    variables are applied on top of whatever was found.
    """
    if path is not None:
        source: Path | None = Path(path)
        if not source.exists():
            logger.warning("Config file not found: %s", source)
            source = None
    else:
        source = _find_config_file()

    data = _load_toml(source) if source else {}
    if data:
        logger.info("Loaded config from %s", source)
    return _apply_env_vars(PressroomConfig.model_validate(data))


def merge_cli_overrides(config: PressroomConfig, **cli_kwargs: object) -> PressroomConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "content_dir": ("paths", "content"),
        "templates_dir": ("paths", "templates"),
        "data_dir": ("paths", "data"),
        "build_rss": ("build", "build_rss"),
        "min_feed_date": ("build", "min_feed_date"),
        "build_type": ("build", "build_type"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return PressroomConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PressroomConfig) -> PressroomConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "PRESSROOM_CONTENT_DIR": ("paths", "content"),
        "PRESSROOM_TEMPLATES_DIR": ("paths", "templates"),
        "PRESSROOM_DATA_DIR": ("paths", "data"),
        "PRESSROOM_BUILD_TYPE": ("build", "build_type"),
        "YOUTUBE_API_KEY": ("youtube", "api_key"),
        "YOUTUBE_CHANNEL_ID": ("youtube", "channel_id"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    rss_raw = os.environ.get("PRESSROOM_BUILD_RSS")
    if rss_raw is not None:
        data["build"]["build_rss"] = rss_raw.lower() in ("true", "1", "yes")
    min_date_raw = os.environ.get("PRESSROOM_MIN_FEED_DATE")
    if min_date_raw is not None:
        data["build"]["min_feed_date"] = int(min_date_raw)

    return PressroomConfig.model_validate(data)
