"""
Syndication feed generation.

Builds an RSS 2.0 document (and optionally a JSON Feed 1.1 document) from the
article catalog. Output carries no generation timestamp: the channel's
lastBuildDate is the newest article's date, so re-running with unchanged
articles and configuration produces byte-identical files.

Every document is rendered in memory before anything touches disk, so a
LoadError from the catalog leaves existing feed files untouched.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Sequence
from xml.etree import ElementTree as ET

from ..config import FeedConfig, SiteConfig
from ..core.articles import ArticleCatalog
from ..core.dates import iso_datetime, rfc822_date
from ..core.types import Article
from ..utils.files import atomic_write_all
from .content import render_markdown

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"

ET.register_namespace("atom", ATOM_NS)
ET.register_namespace("content", CONTENT_NS)

# Characters XML 1.0 cannot represent, even as character references.
_XML_INVALID_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def xml_text(value: str | None) -> str | None:
    """Drop characters that would make the feed document ill-formed."""
    if value is None:
        return None
    return _XML_INVALID_RE.sub("", value)


def article_url(site: SiteConfig, slug: str) -> str:
    return f"{site.base_url}/articles/{slug}"


def feed_url(site: SiteConfig, feed: FeedConfig, filename: str) -> str:
    return f"{site.base_url}/{feed.directory.strip('/')}/{filename}"


def build_rss(articles: Sequence[Article], site: SiteConfig, feed: FeedConfig) -> str:
    """Render an RSS 2.0 document, one item per article in the given order."""
    rss = ET.Element("rss", attrib={"version": "2.0"})
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = xml_text(site.title)
    ET.SubElement(channel, "link").text = xml_text(site.base_url)
    ET.SubElement(channel, "description").text = xml_text(site.description)
    ET.SubElement(channel, "language").text = xml_text(site.language)
    ET.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        attrib={
            "href": feed_url(site, feed, feed.rss_filename),
            "rel": "self",
            "type": "application/rss+xml",
        },
    )
    if site.copyright:
        ET.SubElement(channel, "copyright").text = xml_text(site.copyright)
    if articles:
        ET.SubElement(channel, "lastBuildDate").text = rfc822_date(articles[0].date)

    for article in articles:
        link = article_url(site, article.slug)
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = xml_text(article.title)
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid", attrib={"isPermaLink": "true"}).text = link
        ET.SubElement(item, "description").text = xml_text(article.description)
        ET.SubElement(item, "pubDate").text = rfc822_date(article.date)
        if article.tag:
            ET.SubElement(item, "category").text = xml_text(article.tag)
        if site.author_email:
            name = article.author or site.author_name
            author = f"{site.author_email} ({name})" if name else site.author_email
            ET.SubElement(item, "author").text = xml_text(author)
        if feed.include_content:
            encoded = ET.SubElement(item, f"{{{CONTENT_NS}}}encoded")
            encoded.text = xml_text(render_markdown(article.content))

    ET.indent(rss, space="  ")
    body = ET.tostring(rss, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def build_json_feed(articles: Sequence[Article], site: SiteConfig, feed: FeedConfig) -> str:
    """Render a JSON Feed 1.1 document, one item per article in the given order."""
    payload: dict = {
        "version": JSON_FEED_VERSION,
        "title": site.title,
        "home_page_url": site.base_url,
        "feed_url": feed_url(site, feed, feed.json_filename),
        "description": site.description,
        "language": site.language,
    }
    if site.author_name:
        payload["authors"] = [{"name": site.author_name, "url": site.base_url}]

    items = []
    for article in articles:
        link = article_url(site, article.slug)
        item: dict = {
            "id": link,
            "url": link,
            "title": article.title,
            "summary": article.description,
            "date_published": iso_datetime(article.date),
        }
        if article.tag:
            item["tags"] = [article.tag]
        if article.author:
            item["authors"] = [{"name": article.author}]
        if feed.include_content:
            item["content_html"] = render_markdown(article.content)
        items.append(item)
    payload["items"] = items

    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def generate_rss_feed(
    catalog: ArticleCatalog,
    site: SiteConfig,
    feed: FeedConfig,
    output_dir: Path,
) -> list[Path]:
    """Write the feed documents for ``catalog`` under ``output_dir``.

    Args:
        catalog: Article catalog; loaded here if it is not already
        site: Site identity used in the feed header and links
        feed: Feed output settings
        output_dir: Root of the built site

    Returns:
        Paths of the files written, RSS first

    Raises:
        LoadError: If the catalog cannot be loaded; nothing is written
        WriteError: If a feed file cannot be replaced; all feed files keep
            their previous content
    """
    articles = catalog.all()
    documents = [(feed.rss_filename, build_rss(articles, site, feed))]
    if feed.json_enabled:
        documents.append((feed.json_filename, build_json_feed(articles, site, feed)))

    target_dir = Path(output_dir) / feed.directory
    written = atomic_write_all((target_dir / filename, text) for filename, text in documents)
    for path in written:
        logger.info("Wrote feed %s (%d item(s))", path, len(articles))
    return written
