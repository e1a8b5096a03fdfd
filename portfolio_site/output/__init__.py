"""
Output generation.

This package renders the static HTML pages and the syndication feeds.
"""

from .feed import build_json_feed, build_rss, generate_rss_feed
from .renderer import render_site

__all__ = ["build_rss", "build_json_feed", "generate_rss_feed", "render_site"]
