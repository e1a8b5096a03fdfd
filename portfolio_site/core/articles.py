"""
Article catalog: validation, ordering and the per-process cache.

The catalog reads raw records from an ArticleSource once, validates them into
immutable Article objects and keeps them sorted newest first (ties broken by
slug). Listings and feeds use ``metadata()``, which never carries the body.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from ..input.source import ArticleSource, DirectorySource
from .dates import parse_date
from .errors import FormatError, LoadError
from .types import Article, ArticleMeta

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("slug", "title", "date")
SLUG_RE = re.compile(r"^[a-z0-9][a-z0-9._-]*$", re.IGNORECASE)


class ArticleCatalog:
    """Lazily loaded, read-only collection of articles.

    The first call to ``all()`` reads the source; later calls return the same
    tuple. A failed load caches nothing, so the error repeats on retry.
    """

    def __init__(self, source: ArticleSource):
        self._source = source
        self._articles: tuple[Article, ...] | None = None
        self._by_slug: dict[str, Article] = {}

    @property
    def loaded(self) -> bool:
        return self._articles is not None

    def all(self) -> tuple[Article, ...]:
        """Return every article, newest first."""
        if self._articles is None:
            articles = _load(self._source)
            self._by_slug = {article.slug: article for article in articles}
            self._articles = articles
            logger.info("Loaded %d article(s)", len(articles))
        return self._articles

    def metadata(self) -> tuple[ArticleMeta, ...]:
        """Return the metadata view of every article, newest first."""
        return tuple(article.meta() for article in self.all())

    def latest(self, limit: int) -> tuple[ArticleMeta, ...]:
        return self.metadata()[: max(0, limit)]

    def get(self, slug: str) -> Article:
        self.all()
        return self._by_slug[slug]

    def __len__(self) -> int:
        return len(self.all())


def _load(source: ArticleSource) -> tuple[Article, ...]:
    articles = [_to_article(record) for record in source.read()]

    seen: dict[str, Article] = {}
    for article in articles:
        previous = seen.get(article.slug)
        if previous is not None:
            message = f"Duplicate slug {article.slug!r}"
            if previous.source_path is not None:
                message = f"{message} (also in {previous.source_path})"
            raise LoadError(message, article.source_path)
        seen[article.slug] = article

    # Two stable sorts: slug ascending inside each date, dates descending.
    ordered = sorted(articles, key=lambda article: article.slug)
    ordered.sort(key=lambda article: article.date, reverse=True)
    return tuple(ordered)


def _to_article(record: dict[str, Any]) -> Article:
    source_path = record.get("source_path")
    for key in REQUIRED_FIELDS:
        value = record.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise LoadError(f"Missing required field {key!r}", source_path)

    slug = str(record["slug"]).strip()
    if not SLUG_RE.match(slug):
        raise LoadError(f"Slug {slug!r} is not URL-safe", source_path)

    try:
        published = parse_date(record["date"])
    except FormatError as exc:
        raise LoadError(f"Unparseable date: {exc}", source_path) from exc

    author = record.get("author")
    return Article(
        slug=slug,
        title=str(record["title"]).strip(),
        date=published.isoformat(),
        description=str(record.get("description") or "").strip(),
        tag=str(record.get("tag") or "").strip(),
        author=str(author).strip() if author else None,
        content=str(record.get("content") or ""),
        source_path=Path(source_path) if source_path else None,
    )


# Process-wide catalogs keyed by resolved articles directory. Written once per
# directory during a build and torn down by clear_catalogs().
_CATALOGS: dict[Path, ArticleCatalog] = {}


def get_catalog(articles_dir: Path) -> ArticleCatalog:
    """Return the shared catalog for ``articles_dir``, creating it on first use."""
    key = Path(articles_dir).resolve()
    catalog = _CATALOGS.get(key)
    if catalog is None:
        catalog = ArticleCatalog(DirectorySource(key))
        _CATALOGS[key] = catalog
    return catalog


def get_all_articles(articles_dir: Path) -> tuple[Article, ...]:
    """Return all articles under ``articles_dir``, newest first."""
    return get_catalog(articles_dir).all()


def clear_catalogs() -> None:
    """Drop every cached catalog. Called when a build finishes."""
    _CATALOGS.clear()
