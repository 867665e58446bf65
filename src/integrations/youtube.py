"""YouTube Data API v3 client — the video catalog behind the shows pages.

Uses urllib so the catalog has no HTTP dependency beyond the stdlib.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.parse
import urllib.request
from datetime import datetime
from typing import Protocol

from pressroom.config import YouTubeSectionConfig
from pressroom.content.models import Video, YearBuckets
from pressroom.shared.errors import FetchError
from pressroom.views.partition import split_by_year

logger = logging.getLogger(__name__)

API_BASE = "https://www.googleapis.com/youtube/v3"
PAGE_SIZE = 50


class VideoCatalog(Protocol):
    """What the shows pipeline needs from a video source."""

    def get_videos(self, build_type: str) -> list[Video]:
        """Most recent videos, newest first."""
        ...

    def get_all_videos_by_year(self) -> YearBuckets:
        """Every video ever published, partitioned by year."""
        ...


class YouTubeCatalog:
    """Reads a channel's uploads playlist."""

    def __init__(self, config: YouTubeSectionConfig) -> None:
        self.config = config

    def _request(self, endpoint: str, **params: str | int) -> dict:
        query = urllib.parse.urlencode({**params, "key": self.config.api_key})
        url = f"{API_BASE}/{endpoint}?{query}"
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=30) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except (OSError, http.client.HTTPException, json.JSONDecodeError) as exc:
            raise FetchError(f"YouTube {endpoint} request failed: {exc}") from exc

    def _uploads_playlist(self) -> str:
        data = self._request("channels", part="contentDetails", id=self.config.channel_id)
        try:
            return data["items"][0]["contentDetails"]["relatedPlaylists"]["uploads"]
        except (KeyError, IndexError) as exc:
            raise FetchError(f"No uploads playlist for channel {self.config.channel_id}") from exc

    def _playlist_page(self, playlist_id: str, page_token: str = "") -> dict:
        params: dict[str, str | int] = {
            "part": "snippet",
            "playlistId": playlist_id,
            "maxResults": PAGE_SIZE,
        }
        if page_token:
            params["pageToken"] = page_token
        return self._request("playlistItems", **params)

    def get_videos(self, build_type: str) -> list[Video]:
        if not self.config.is_configured:
            logger.warning("YouTube API key or channel not configured; no videos for %s build", build_type)
            return []
        playlist = self._uploads_playlist()
        videos: list[Video] = []
        page_token = ""
        while len(videos) < self.config.max_results:
            data = self._playlist_page(playlist, page_token)
            videos.extend(_parse_playlist_items(data))
            page_token = data.get("nextPageToken", "")
            if not page_token:
                break
        videos.sort(
            key=lambda v: v.published_at.timestamp() if v.published_at else float("-inf"),
            reverse=True,
        )
        return videos[: self.config.max_results]

    def get_all_videos_by_year(self) -> YearBuckets:
        if not self.config.is_configured:
            logger.warning("YouTube API key or channel not configured; no video history")
            return {}
        playlist = self._uploads_playlist()
        videos: list[Video] = []
        page_token = ""
        while True:
            data = self._playlist_page(playlist, page_token)
            videos.extend(_parse_playlist_items(data))
            page_token = data.get("nextPageToken", "")
            if not page_token:
                break
        logger.info("Fetched %d videos from the uploads playlist", len(videos))
        return split_by_year(v.to_content_item() for v in videos)


def _parse_published(raw: str) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable video timestamp %r", raw)
        return None


def _parse_playlist_items(data: dict) -> list[Video]:
    videos: list[Video] = []
    for entry in data.get("items", []):
        snippet = entry.get("snippet", {})
        video_id = snippet.get("resourceId", {}).get("videoId", "")
        if not video_id:
            continue
        thumbs = snippet.get("thumbnails", {})
        thumb = (thumbs.get("high") or thumbs.get("default") or {}).get("url", "")
        videos.append(
            Video(
                video_id=video_id,
                title=snippet.get("title", ""),
                description=snippet.get("description", ""),
                published_at=_parse_published(snippet.get("publishedAt", "")),
                thumbnail=thumb,
            )
        )
    return videos
