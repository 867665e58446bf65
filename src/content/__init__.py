"""Content domain — the item model and file discovery."""

from pressroom.content.discovery import get_file_list, parse_metadata, read_content_item
from pressroom.content.models import (
    UNKNOWN_YEAR,
    AnnouncementRecord,
    ContentItem,
    Video,
    ViewOptions,
    YearBuckets,
)

__all__ = [
    "UNKNOWN_YEAR",
    "AnnouncementRecord",
    "ContentItem",
    "Video",
    "ViewOptions",
    "YearBuckets",
    "get_file_list",
    "parse_metadata",
    "read_content_item",
]
