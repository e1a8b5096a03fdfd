"""
Static page rendering.

This module renders the site pages with Jinja2 templates. One template set
serves every profile: the biographical text, social links, skills and projects
all come from ProfileConfig.

Pages written under the output directory:
- index.html: Home page with the newest articles and skill lists
- about/index.html: About page
- projects/index.html: Projects listing
- articles/index.html: Articles index
- articles/<slug>/index.html: One page per article
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from ..config import AppConfig
from ..core.articles import ArticleCatalog
from ..core.dates import format_date
from ..utils.files import atomic_write_text
from .content import render_markdown
from .feed import feed_url

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

NAV = [
    {"label": "About", "href": "/about/"},
    {"label": "Articles", "href": "/articles/"},
    {"label": "Projects", "href": "/projects/"},
]


def build_environment(cfg: AppConfig, production: bool = False) -> Environment:
    """Create the Jinja2 environment with site globals and filters."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_date"] = format_date
    env.filters["markdown"] = lambda text: Markup(render_markdown(text or ""))
    env.globals.update(
        site=cfg.site,
        profile=cfg.profile,
        nav=NAV,
        # Only production builds write the feed, so only they advertise it.
        feed_url=feed_url(cfg.site, cfg.feed, cfg.feed.rss_filename) if production else None,
    )
    return env


def render_site(
    catalog: ArticleCatalog,
    cfg: AppConfig,
    output_dir: Path,
    production: bool = False,
    on_page: Callable[[Path], None] | None = None,
) -> list[Path]:
    """Render every page of the site to ``output_dir``.

    Listings only receive article metadata; the Markdown body is rendered
    on the article's own page.

    Args:
        catalog: Article catalog (loaded on first access)
        cfg: Application configuration
        output_dir: Directory to write the pages into
        production: Whether the page heads link to the RSS feed
        on_page: Optional callback invoked after each page is written

    Returns:
        Paths of the written pages, in write order
    """
    env = build_environment(cfg, production)
    output_dir = Path(output_dir)
    profile = cfg.profile
    metadata = catalog.metadata()

    pages: list[tuple[str, str, dict[str, Any]]] = [
        ("index.html", "home.html", {"articles": catalog.latest(profile.home_article_limit)}),
        ("about/index.html", "about.html", {}),
        ("projects/index.html", "projects.html", {"projects": profile.projects}),
        ("articles/index.html", "articles.html", {"articles": metadata}),
    ]
    for article in catalog.all():
        pages.append(
            (
                f"articles/{article.slug}/index.html",
                "article.html",
                {"article": article.meta(), "body": Markup(render_markdown(article.content))},
            )
        )

    written = []
    for relative, template_name, context in pages:
        html = env.get_template(template_name).render(**context)
        path = atomic_write_text(output_dir / relative, html)
        logger.debug("Rendered %s", path)
        written.append(path)
        if on_page is not None:
            on_page(path)
    return written


def page_count(catalog: ArticleCatalog) -> int:
    """Number of pages render_site will write for ``catalog``."""
    return 4 + len(catalog)
