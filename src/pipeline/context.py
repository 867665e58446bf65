"""The explicit configuration value handed to every pipeline entry point."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pressroom.config import PressroomConfig
from pressroom.shared.errors import PipelineReport
from pressroom.views.generators import ViewGenerators
from pressroom.views.render import TemplateRenderer


@dataclass
class BuildContext:
    """Config, view primitives, and failure report for one build run."""

    config: PressroomConfig
    views: ViewGenerators
    report: PipelineReport = field(default_factory=PipelineReport)

    @classmethod
    def from_config(cls, config: PressroomConfig) -> BuildContext:
        renderer = TemplateRenderer(config.paths.templates_dir)
        views = ViewGenerators(renderer, build_rss=config.build.build_rss, site=config.site)
        return cls(config=config, views=views)

    @property
    def content_dir(self) -> Path:
        return self.config.paths.content_dir

    @property
    def build_rss(self) -> bool:
        return self.config.build.build_rss

    @property
    def min_feed_date(self) -> int:
        return self.config.build.min_feed_date
