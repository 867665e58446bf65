"""RSS 2.0 and Atom 1.0 serialization."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from email.utils import format_datetime
from xml.etree.ElementTree import Element, SubElement, indent, tostring

from pydantic import BaseModel

from pressroom.content.models import ContentItem

ATOM_NS = "http://www.w3.org/2005/Atom"
# Fixed so rebuilding an empty feed leaves its bytes unchanged.
EMPTY_FEED_UPDATED = datetime(1970, 1, 1)


class FeedMeta(BaseModel):
    """Channel-level fields shared by both feed formats."""

    title: str
    description: str = ""
    link: str
    feed_url: str
    author: str = ""
    updated: datetime


def feed_updated(items: Sequence[ContentItem]) -> datetime:
    """Newest date among ``items``; ``EMPTY_FEED_UPDATED`` for an empty feed."""
    dates = [d for i in items for d in (i.updated_date, i.published_date) if d]
    return max(dates) if dates else EMPTY_FEED_UPDATED


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


def _iso(value: datetime) -> str:
    return _utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def _entry_id(item: ContentItem, meta: FeedMeta) -> str:
    return item.url or f"{meta.link.rstrip('/')}/{item.path}"


def _to_xml(root: Element) -> str:
    indent(root, space="  ")
    return "<?xml version='1.0' encoding='UTF-8'?>\n" + tostring(root, encoding="unicode") + "\n"


def render_rss(items: Sequence[ContentItem], meta: FeedMeta) -> str:
    """Serialize ``items`` in the given order as an RSS 2.0 document."""
    root = Element("rss", attrib={"version": "2.0", "xmlns:atom": ATOM_NS})
    channel = SubElement(root, "channel")
    SubElement(channel, "title").text = meta.title
    SubElement(channel, "link").text = meta.link
    SubElement(channel, "description").text = meta.description
    SubElement(channel, "lastBuildDate").text = format_datetime(_utc(meta.updated))
    SubElement(
        channel,
        "atom:link",
        attrib={"href": meta.feed_url, "rel": "self", "type": "application/rss+xml"},
    )

    for item in items:
        el = SubElement(channel, "item")
        SubElement(el, "title").text = item.title
        SubElement(el, "link").text = _entry_id(item, meta)
        SubElement(el, "guid", attrib={"isPermaLink": "true"}).text = _entry_id(item, meta)
        if item.published_date:
            SubElement(el, "pubDate").text = format_datetime(_utc(item.published_date))
        for tag in item.tags:
            SubElement(el, "category").text = tag
        SubElement(el, "description").text = item.content or item.description
    return _to_xml(root)


def render_atom(items: Sequence[ContentItem], meta: FeedMeta) -> str:
    """Serialize ``items`` in the given order as an Atom 1.0 document."""
    root = Element("feed", attrib={"xmlns": ATOM_NS})
    SubElement(root, "id").text = meta.feed_url
    SubElement(root, "title").text = meta.title
    if meta.description:
        SubElement(root, "subtitle").text = meta.description
    SubElement(root, "updated").text = _iso(meta.updated)
    SubElement(root, "link", attrib={"href": meta.link, "rel": "alternate"})
    SubElement(root, "link", attrib={"href": meta.feed_url, "rel": "self"})
    if meta.author:
        author = SubElement(root, "author")
        SubElement(author, "name").text = meta.author

    for item in items:
        entry = SubElement(root, "entry")
        SubElement(entry, "id").text = _entry_id(item, meta)
        SubElement(entry, "title").text = item.title
        updated = item.updated_date or item.published_date or meta.updated
        SubElement(entry, "updated").text = _iso(updated)
        if item.published_date:
            SubElement(entry, "published").text = _iso(item.published_date)
        SubElement(
            entry, "link", attrib={"href": _entry_id(item, meta), "rel": "alternate"}
        )
        for tag in item.tags:
            SubElement(entry, "category", attrib={"term": tag})
        if item.description:
            SubElement(entry, "summary").text = item.description
        if item.content:
            content = SubElement(entry, "content", attrib={"type": "html"})
            content.text = item.content
    return _to_xml(root)
