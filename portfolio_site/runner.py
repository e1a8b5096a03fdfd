"""
Build orchestration for the portfolio site.

This module coordinates a full static build:
1. Load and validate the article catalog
2. Render every HTML page
3. Generate the RSS / JSON feeds (production builds only)

The catalog is loaded before anything is written, so a malformed article
aborts the build with the previous output intact. The shared catalog cache is
cleared when the build ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from .config import AppConfig
from .core.articles import ArticleCatalog, clear_catalogs, get_catalog
from .output.feed import generate_rss_feed
from .output.renderer import page_count, render_site
from .utils.logging import build_stage, log_event, setup_logging


@dataclass
class BuildResult:
    """Outcome of a build.

    Attributes:
        output_dir: Directory the site was written to
        pages: HTML pages written, in write order
        feeds: Feed files written; empty for development builds
        article_count: Number of articles in the catalog
    """
    output_dir: Path
    pages: list[Path] = field(default_factory=list)
    feeds: list[Path] = field(default_factory=list)
    article_count: int = 0


def run_build(
    cfg: AppConfig,
    output_dir: Path | None = None,
    production: bool | None = None,
    show_progress: bool = True,
    console: Console | None = None,
) -> BuildResult:
    """Run the complete site build.

    Args:
        cfg: Application configuration
        output_dir: Output directory; defaults to ``cfg.build.output_dir``
        production: Whether to generate feeds; defaults to ``cfg.build.production``
        show_progress: Whether to display a progress bar
        console: Rich console for output (creates default if None)

    Returns:
        BuildResult describing what was written

    Raises:
        LoadError: If any article record is invalid
        WriteError: If an output file cannot be written
    """
    output_dir = Path(output_dir or cfg.build.output_dir)
    if production is None:
        production = cfg.build.production
    logger = setup_logging(cfg.logging, output_dir.resolve().parent)

    log_event(
        logger,
        "Build start",
        event="build_start",
        output=str(output_dir),
        articles_dir=cfg.build.articles_dir,
        production=production,
    )
    try:
        with build_stage(logger, "load") as stage:
            catalog = get_catalog(Path(cfg.build.articles_dir))
            articles = catalog.all()
            stage["articles"] = len(articles)
        result = BuildResult(output_dir=output_dir, article_count=len(articles))

        if show_progress:
            _build_with_progress(catalog, cfg, result, production, logger, console or Console())
        else:
            with build_stage(logger, "pages") as stage:
                result.pages = render_site(catalog, cfg, output_dir, production=production)
                stage["pages"] = len(result.pages)
            if production:
                with build_stage(logger, "feeds") as stage:
                    result.feeds = generate_rss_feed(catalog, cfg.site, cfg.feed, output_dir)
                    stage["feeds"] = len(result.feeds)

        if not production:
            logger.info("Development build: feed generation skipped")
        log_event(
            logger,
            "Build complete",
            event="build_complete",
            pages=len(result.pages),
            feeds=len(result.feeds),
            articles=result.article_count,
        )
        return result
    finally:
        clear_catalogs()


def run_feed(cfg: AppConfig, output_dir: Path | None = None) -> list[Path]:
    """Generate only the feed files."""
    output_dir = Path(output_dir or cfg.build.output_dir)
    logger = setup_logging(cfg.logging, output_dir.resolve().parent)
    try:
        with build_stage(logger, "feeds") as stage:
            feeds = generate_rss_feed(
                get_catalog(Path(cfg.build.articles_dir)), cfg.site, cfg.feed, output_dir
            )
            stage["feeds"] = len(feeds)
        log_event(logger, "Feeds generated", event="feeds_generated", feeds=[str(p) for p in feeds])
        return feeds
    finally:
        clear_catalogs()


def _build_with_progress(
    catalog: ArticleCatalog,
    cfg: AppConfig,
    result: BuildResult,
    production: bool,
    logger: logging.Logger,
    console: Console,
) -> None:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )
    with progress:
        page_task = progress.add_task("Pages", total=page_count(catalog))
        with build_stage(logger, "pages") as stage:
            result.pages = render_site(
                catalog,
                cfg,
                result.output_dir,
                production=production,
                on_page=lambda _path: progress.advance(page_task, 1),
            )
            stage["pages"] = len(result.pages)
        if production:
            feed_task = progress.add_task("Feeds", total=1)
            with build_stage(logger, "feeds") as stage:
                result.feeds = generate_rss_feed(catalog, cfg.site, cfg.feed, result.output_dir)
                stage["feeds"] = len(result.feeds)
            progress.advance(feed_task, 1)
