"""Discovers content files and reads their metadata into ContentItems.

Two metadata styles are understood:

YAML front matter::

    ---
    title: Headless Chrome
    published_on: 2017-04-01
    tags: [chrome59, headless]
    ---

and devsite page headers, where ``key: value`` lines precede the body and
``{# wf_key: value #}`` comments carry the publishing fields::

    description: Getting started with Headless Chrome.

    {# wf_published_on: 2017-04-01 #}
    {# wf_tags: chrome59,headless #}

    # Getting Started with Headless Chrome {: .page-title }
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from pressroom.content.models import ContentItem
from pressroom.shared.errors import DiscoveryError

logger = logging.getLogger(__name__)

_WF_COMMENT = re.compile(r"^\{#\s*wf_([a-z_]+)\s*:\s*(.*?)\s*#\}\s*$")
_HEADER_LINE = re.compile(r"^([a-z_]+):\s*(.*)$")
_PAGE_TITLE = re.compile(r"^#\s+(.+?)\s*(\{:.*\})?\s*$")

_PUBLISHED_KEYS = ("published_on", "published", "date")
_UPDATED_KEYS = ("updated_on", "updated")


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a glob with ``**`` support into an anchored regex."""
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(out) + "$")


def match_patterns(relative_paths: list[str], patterns: list[str]) -> list[str]:
    """Apply glob patterns in order; a ``!`` pattern removes earlier matches."""
    selected: set[str] = set()
    for pattern in patterns:
        negate = pattern.startswith("!")
        regex = _glob_to_regex(pattern[1:] if negate else pattern)
        matched = {p for p in relative_paths if regex.match(p)}
        if negate:
            selected -= matched
        else:
            selected |= matched
    return sorted(selected)


def _coerce_date(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning("Unparseable date %r", value)
        return None


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _split_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return [str(t) for t in value]


def parse_metadata(text: str) -> tuple[dict[str, Any], str]:
    """Return (metadata, body) from a content file's text."""
    if text.startswith("---"):
        parts = text.split("---", 2)
        if len(parts) == 3:
            try:
                meta = yaml.safe_load(parts[1]) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid front matter: {exc}") from exc
            if not isinstance(meta, dict):
                raise ValueError("front matter is not a mapping")
            return meta, parts[2].lstrip("\n")

    meta: dict[str, Any] = {}
    body_lines: list[str] = []
    in_header = True
    for line in text.splitlines():
        wf = _WF_COMMENT.match(line)
        if wf:
            meta[wf.group(1)] = wf.group(2)
            continue
        if in_header:
            header = _HEADER_LINE.match(line)
            if header:
                meta[header.group(1)] = header.group(2)
                continue
            if not line.strip():
                continue
            in_header = False
        title = _PAGE_TITLE.match(line)
        if title and "title" not in meta:
            meta["title"] = title.group(1)
            continue
        body_lines.append(line)
    return meta, "\n".join(body_lines).strip() + "\n"


def _first(meta: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if meta.get(key) not in (None, ""):
            return meta[key]
    return None


def _page_url(url_base: str, relative: str) -> str:
    stem = relative.removesuffix(".md")
    if stem == "index" or stem.endswith("/index"):
        stem = stem.removesuffix("index")
    return f"{url_base.rstrip('/')}/{stem}" if url_base else stem


def read_content_item(path: Path, relative: str, *, url_base: str = "") -> ContentItem:
    """Build a ContentItem from one file.

    Raises:
        DiscoveryError: If the file cannot be read or its metadata is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DiscoveryError(f"Could not read content file {path}: {exc}") from exc
    try:
        meta, body = parse_metadata(text)
    except ValueError as exc:
        raise DiscoveryError(f"Bad metadata in {path}: {exc}") from exc

    published = _coerce_date(_first(meta, _PUBLISHED_KEYS))
    updated = _coerce_date(_first(meta, _UPDATED_KEYS))
    extras = {
        k: v
        for k, v in meta.items()
        if k not in (*_PUBLISHED_KEYS, *_UPDATED_KEYS, "tags", "featured")
    }
    extras.setdefault("title", path.stem)
    extras.setdefault("url", _page_url(url_base, relative))
    return ContentItem(
        path=relative,
        published_date=published,
        updated_date=updated,
        tags=_split_tags(meta.get("tags")),
        featured=_coerce_bool(meta.get("featured", False)),
        content=body,
        metadata=extras,
    )


def get_file_list(root: Path, patterns: list[str], *, url_base: str = "") -> list[ContentItem]:
    """Discover content under ``root`` matching ``patterns``.

    Returns items in path order; callers sort them.

    Raises:
        DiscoveryError: If ``root`` is missing or any matched file is unreadable.
    """
    if not root.is_dir():
        raise DiscoveryError(f"Content directory not found: {root}")

    relative_paths = [p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()]
    selected = match_patterns(relative_paths, patterns)
    items = [read_content_item(root / rel, rel, url_base=url_base) for rel in selected]
    logger.info("Discovered %d content file(s) in %s", len(items), root)
    return items
