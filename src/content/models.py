"""Content domain models — pure Pydantic v2 data types.

``ContentItem`` is the unit flowing through every view. Items and
``ViewOptions`` are frozen: views that need a variant (a content-stripped
feed entry, a per-year title) build a copy instead of mutating the shared
value.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_YEAR = "unknown"


class ContentItem(BaseModel):
    """One publishable unit: an article, case study, tool page, or show."""

    model_config = ConfigDict(frozen=True)

    path: str
    published_date: datetime | None = None
    updated_date: datetime | None = None
    tags: tuple[str, ...] = ()
    featured: bool = False
    content: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("published_date", "updated_date", mode="before")
    @classmethod
    def _date_to_datetime(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)
        return value

    @field_validator("published_date", "updated_date")
    @classmethod
    def _as_naive_utc(cls, value: datetime | None) -> datetime | None:
        # Naive UTC everywhere so dates from different sources compare.
        if value is not None and value.tzinfo is not None:
            return value.astimezone(UTC).replace(tzinfo=None)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        seen: list[str] = []
        for tag in value:
            tag = str(tag).strip()
            if tag and tag not in seen:
                seen.append(tag)
        return tuple(seen)

    @property
    def title(self) -> str:
        return str(self.metadata.get("title", ""))

    @property
    def description(self) -> str:
        return str(self.metadata.get("description", ""))

    @property
    def url(self) -> str:
        return str(self.metadata.get("url", ""))

    def without_content(self) -> ContentItem:
        """Return a copy with the body stripped, for summary-only feeds."""
        return self.model_copy(update={"content": ""})


class ViewOptions(BaseModel):
    """Read-only settings for a single generator call."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    section: str = ""
    output_path: str
    template: str | None = None
    year: str | None = None
    include_content: bool = True
    max_items: int | None = None
    articles_to_show: int = 4

    def derive(self, **overrides: Any) -> ViewOptions:
        """Return a new options record with ``overrides`` applied."""
        return self.model_validate({**self.model_dump(), **overrides})


YearBuckets = dict[str, list[ContentItem]]


class AnnouncementRecord(BaseModel):
    """Site-wide banner copied into every ``_project.yaml``."""

    enabled: bool = False
    description: str = ""
    background: str | None = None


class Video(BaseModel):
    """One entry from the external video catalog."""

    model_config = ConfigDict(frozen=True)

    video_id: str
    title: str = ""
    description: str = ""
    published_at: datetime | None = None
    thumbnail: str = ""

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    def to_content_item(self) -> ContentItem:
        """Adapt to the shape every view generator consumes."""
        return ContentItem(
            path=f"shows/{self.video_id}",
            published_date=self.published_at,
            updated_date=self.published_at,
            content=self.description,
            metadata={
                "title": self.title,
                "description": self.description,
                "url": self.url,
                "image": self.thumbnail,
                "video_id": self.video_id,
            },
        )
