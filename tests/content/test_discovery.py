"""Tests for content discovery and metadata parsing."""

from datetime import datetime
from pathlib import Path

import pytest

from pressroom.content.discovery import get_file_list, match_patterns, parse_metadata
from pressroom.shared.errors import DiscoveryError

DEVSITE_PAGE = """project_path: /web/_project.yaml
book_path: /web/updates/_book.yaml
description: Getting started with Headless Chrome.

{# wf_updated_on: 2019-01-10 #}
{# wf_published_on: 2017-04-01 #}
{# wf_tags: chrome59,headless,testing #}

# Getting Started with Headless Chrome {: .page-title }

Headless Chrome is shipping in Chrome 59.
"""

FRONT_MATTER_PAGE = """---
title: Spotify case study
published_on: 2021-06-01
featured: true
region: europe
tags:
  - media
  - pwa
---
Spotify built a PWA.
"""


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestMatchPatterns:
    def test_double_star_matches_root_and_nested(self):
        paths = ["a.md", "2017/b.md", "2017/04/c.md", "img/x.png"]
        assert match_patterns(paths, ["**/*.md"]) == ["2017/04/c.md", "2017/b.md", "a.md"]

    def test_negation_removes_scaffold_files(self):
        paths = ["index.md", "2017/index.md", "tags/chrome.md", "2017/post.md", "deep/tags/x.md"]
        selected = match_patterns(paths, ["**/*.md", "!tags/*", "!**/index.md"])
        assert selected == ["2017/post.md", "deep/tags/x.md"]


class TestParseMetadata:
    def test_devsite_header(self):
        meta, body = parse_metadata(DEVSITE_PAGE)
        assert meta["description"] == "Getting started with Headless Chrome."
        assert meta["published_on"] == "2017-04-01"
        assert meta["tags"] == "chrome59,headless,testing"
        assert meta["title"] == "Getting Started with Headless Chrome"
        assert body.strip() == "Headless Chrome is shipping in Chrome 59."

    def test_front_matter(self):
        meta, body = parse_metadata(FRONT_MATTER_PAGE)
        assert meta["title"] == "Spotify case study"
        assert meta["tags"] == ["media", "pwa"]
        assert body.strip() == "Spotify built a PWA."

    def test_front_matter_must_be_mapping(self):
        with pytest.raises(ValueError):
            parse_metadata("---\n- a\n- b\n---\nbody\n")


class TestGetFileList:
    def test_reads_items(self, tmp_path: Path):
        _write(tmp_path, "2017/04/headless.md", DEVSITE_PAGE)
        _write(tmp_path, "showcase/spotify.md", FRONT_MATTER_PAGE)

        items = get_file_list(tmp_path, ["**/*.md"], url_base="https://example.com/web/updates")

        assert [i.path for i in items] == ["2017/04/headless.md", "showcase/spotify.md"]
        headless, spotify = items
        assert headless.published_date == datetime(2017, 4, 1)
        assert headless.updated_date == datetime(2019, 1, 10)
        assert headless.tags == ("chrome59", "headless", "testing")
        assert headless.url == "https://example.com/web/updates/2017/04/headless"
        assert headless.featured is False
        assert spotify.featured is True
        assert spotify.published_date == datetime(2021, 6, 1)
        assert spotify.metadata["region"] == "europe"
        assert spotify.updated_date is None

    def test_honours_negation(self, tmp_path: Path):
        _write(tmp_path, "index.md", DEVSITE_PAGE)
        _write(tmp_path, "tags/chrome.md", DEVSITE_PAGE)
        _write(tmp_path, "2017/post.md", DEVSITE_PAGE)

        items = get_file_list(tmp_path, ["**/*.md", "!tags/*", "!**/index.md"])
        assert [i.path for i in items] == ["2017/post.md"]

    def test_missing_root_is_discovery_error(self, tmp_path: Path):
        with pytest.raises(DiscoveryError):
            get_file_list(tmp_path / "nope", ["**/*.md"])

    def test_bad_front_matter_is_discovery_error(self, tmp_path: Path):
        _write(tmp_path, "bad.md", "---\ntitle: [unclosed\n---\nbody\n")
        with pytest.raises(DiscoveryError):
            get_file_list(tmp_path, ["**/*.md"])

    def test_empty_directory(self, tmp_path: Path):
        assert get_file_list(tmp_path, ["**/*.md"]) == []
