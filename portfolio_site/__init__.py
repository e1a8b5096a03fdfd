"""
Portfolio Site - static generator for a personal portfolio and blog.

This package renders a home page, an about page, a projects page and an
articles section from a YAML profile and Markdown articles, and publishes
RSS / JSON feeds for production builds.

Main entry point is the CLI via `portfolio-site build` command.

Example:
    $ portfolio-site build -c site.yaml -o public/ --production
"""

__all__ = [
    "__version__",
    "ArticleCatalog",
    "get_all_articles",
    "format_date",
    "generate_rss_feed",
]
__version__ = "0.1.0"

from .core.articles import ArticleCatalog, get_all_articles
from .core.dates import format_date
from .output.feed import generate_rss_feed
