"""Tests for RSS / JSON feed generation."""

import json
import os
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest

from portfolio_site.config import FeedConfig, SiteConfig
from portfolio_site.core.articles import ArticleCatalog
from portfolio_site.core.errors import LoadError, WriteError
from portfolio_site.input.source import StaticSource
from portfolio_site.output.feed import (
    CONTENT_NS,
    build_json_feed,
    build_rss,
    generate_rss_feed,
)


def _site() -> SiteConfig:
    return SiteConfig(
        title="Jane Doe",
        description="Writing on technology.",
        base_url="https://example.com",
        author_name="Jane Doe",
        author_email="jane@example.com",
    )


def _catalog() -> ArticleCatalog:
    return ArticleCatalog(
        StaticSource(
            [
                {
                    "slug": "a",
                    "title": "Older",
                    "date": "2023-01-01",
                    "description": "First post",
                    "tag": "meta",
                    "content": "Hello *a*",
                },
                {
                    "slug": "b",
                    "title": "Newer & better",
                    "date": "2024-06-15",
                    "description": "Second post",
                    "tag": "",
                    "content": "## Heading\n\nHello b",
                },
            ]
        )
    )


def _items(xml_text: str) -> list[ET.Element]:
    root = ET.fromstring(xml_text.encode("utf-8"))
    return root.findall("./channel/item")


def test_rss_items_follow_catalog_order():
    catalog = _catalog()
    xml_text = build_rss(catalog.all(), _site(), FeedConfig())
    items = _items(xml_text)

    assert len(items) == len(catalog)
    assert [item.findtext("link") for item in items] == [
        "https://example.com/articles/b",
        "https://example.com/articles/a",
    ]
    assert items[0].findtext("title") == "Newer & better"
    assert items[0].findtext("guid") == "https://example.com/articles/b"
    assert items[0].findtext("pubDate") == "Sat, 15 Jun 2024 00:00:00 +0000"
    assert items[0].find("category") is None
    assert items[1].findtext("category") == "meta"
    assert items[1].findtext("author") == "jane@example.com (Jane Doe)"
    assert "<h2>Heading</h2>" in items[0].findtext(f"{{{CONTENT_NS}}}encoded")


def test_rss_channel_header_uses_newest_article_date():
    xml_text = build_rss(_catalog().all(), _site(), FeedConfig())
    channel = ET.fromstring(xml_text.encode("utf-8")).find("channel")

    assert channel.findtext("title") == "Jane Doe"
    assert channel.findtext("link") == "https://example.com"
    assert channel.findtext("language") == "en"
    assert channel.findtext("lastBuildDate") == "Sat, 15 Jun 2024 00:00:00 +0000"
    self_link = channel.find("{http://www.w3.org/2005/Atom}link")
    assert self_link.get("href") == "https://example.com/rss/feed.xml"
    assert self_link.get("rel") == "self"


def test_rss_without_articles_or_content():
    xml_text = build_rss((), _site(), FeedConfig(include_content=False))
    channel = ET.fromstring(xml_text.encode("utf-8")).find("channel")

    assert channel.find("lastBuildDate") is None
    assert channel.findall("item") == []
    assert CONTENT_NS not in xml_text


def test_json_feed_items():
    payload = json.loads(build_json_feed(_catalog().all(), _site(), FeedConfig()))

    assert payload["version"] == "https://jsonfeed.org/version/1.1"
    assert payload["feed_url"] == "https://example.com/rss/feed.json"
    assert [item["id"] for item in payload["items"]] == [
        "https://example.com/articles/b",
        "https://example.com/articles/a",
    ]
    assert payload["items"][0]["date_published"] == "2024-06-15T00:00:00+00:00"
    assert payload["items"][1]["tags"] == ["meta"]


def test_generate_rss_feed_is_byte_identical_across_runs(tmp_path: Path):
    first = [path.read_bytes() for path in generate_rss_feed(_catalog(), _site(), FeedConfig(), tmp_path)]
    second = [path.read_bytes() for path in generate_rss_feed(_catalog(), _site(), FeedConfig(), tmp_path)]

    assert first == second
    assert (tmp_path / "rss" / "feed.xml").exists()
    assert (tmp_path / "rss" / "feed.json").exists()


def test_generate_rss_feed_json_can_be_disabled(tmp_path: Path):
    paths = generate_rss_feed(_catalog(), _site(), FeedConfig(json_enabled=False), tmp_path)

    assert paths == [tmp_path / "rss" / "feed.xml"]
    assert not (tmp_path / "rss" / "feed.json").exists()


def test_load_error_leaves_existing_feed_untouched(tmp_path: Path):
    feed_path = tmp_path / "rss" / "feed.xml"
    feed_path.parent.mkdir(parents=True)
    feed_path.write_text("previous", encoding="utf-8")
    broken = ArticleCatalog(StaticSource([{"slug": "a", "title": "No date"}]))

    with pytest.raises(LoadError):
        generate_rss_feed(broken, _site(), FeedConfig(), tmp_path)

    assert feed_path.read_text(encoding="utf-8") == "previous"
    assert not (tmp_path / "rss" / "feed.json").exists()


def test_write_failure_keeps_previous_feed(tmp_path: Path, monkeypatch):
    feed_path = tmp_path / "rss" / "feed.xml"
    feed_path.parent.mkdir(parents=True)
    feed_path.write_text("previous", encoding="utf-8")

    def fail_replace(src, dst):
        raise PermissionError("read-only")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(WriteError):
        generate_rss_feed(_catalog(), _site(), FeedConfig(), tmp_path)

    assert feed_path.read_text(encoding="utf-8") == "previous"
    assert sorted(p.name for p in feed_path.parent.iterdir()) == ["feed.xml"]


def test_unwritable_destination_raises_write_error(tmp_path: Path):
    (tmp_path / "rss").write_text("not a directory", encoding="utf-8")

    with pytest.raises(WriteError):
        generate_rss_feed(_catalog(), _site(), FeedConfig(), tmp_path)


def test_rss_drops_characters_xml_cannot_carry():
    catalog = ArticleCatalog(
        StaticSource(
            [
                {
                    "slug": "bell",
                    "title": "Bell\bchar",
                    "date": "2024-06-15",
                    "description": "Form\x0cfeed",
                    "tag": "odd\x1f",
                    "content": "Bell\x07 ring",
                }
            ]
        )
    )

    xml_text = build_rss(catalog.all(), _site(), FeedConfig())
    item = _items(xml_text)[0]

    assert item.findtext("title") == "Bellchar"
    assert item.findtext("description") == "Formfeed"
    assert item.findtext("category") == "odd"
    assert "Bell ring" in item.findtext(f"{{{CONTENT_NS}}}encoded")


def test_failed_json_write_restores_rss(tmp_path: Path, monkeypatch):
    feed_dir = tmp_path / "rss"
    feed_dir.mkdir()
    (feed_dir / "feed.xml").write_text("old-xml", encoding="utf-8")
    (feed_dir / "feed.json").write_text("old-json", encoding="utf-8")
    real_replace = os.replace

    def replace(src, dst):
        if Path(dst).name == "feed.json":
            raise PermissionError("read-only")
        real_replace(src, dst)

    monkeypatch.setattr(os, "replace", replace)

    with pytest.raises(WriteError):
        generate_rss_feed(_catalog(), _site(), FeedConfig(), tmp_path)

    assert (feed_dir / "feed.xml").read_text(encoding="utf-8") == "old-xml"
    assert (feed_dir / "feed.json").read_text(encoding="utf-8") == "old-json"
    assert sorted(p.name for p in feed_dir.iterdir()) == ["feed.json", "feed.xml"]


def test_failed_json_write_removes_new_rss(tmp_path: Path, monkeypatch):
    real_replace = os.replace

    def replace(src, dst):
        if Path(dst).name == "feed.json":
            raise PermissionError("read-only")
        real_replace(src, dst)

    monkeypatch.setattr(os, "replace", replace)

    with pytest.raises(WriteError):
        generate_rss_feed(_catalog(), _site(), FeedConfig(), tmp_path)

    assert list((tmp_path / "rss").iterdir()) == []
