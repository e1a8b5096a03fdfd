"""
Command-line interface for the portfolio site generator.

Uses Typer to provide commands for building the site, generating the feeds
on their own, and listing the article catalog.
"""

from __future__ import annotations

from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, load_config
from .core.articles import clear_catalogs, get_catalog
from .core.dates import format_date
from .core.errors import SiteBuildError
from .runner import run_build, run_feed

app = typer.Typer(add_completion=False)
console = Console()


def _load(
    config: Path | None,
    articles: Path | None,
    log_level: str | None = None,
    log_file: bool | None = None,
) -> AppConfig:
    try:
        cfg = load_config(str(config) if config else None)
    except (yaml.YAMLError, ValueError) as exc:
        console.print(f"[red]Invalid config:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    if articles is not None:
        cfg.build.articles_dir = str(articles)
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    return cfg


@app.command()
def build(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory."),
    articles: Path | None = typer.Option(None, "--articles", "-a", help="Articles directory."),
    production: bool | None = typer.Option(
        None,
        "--production/--development",
        help="Production builds also write the RSS and JSON feeds.",
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Build the static site.

    Renders the home, about, projects and article pages. Feeds are only
    generated for production builds.

    Args:
        config: Optional path to YAML config file
        output: Directory for the built site
        articles: Directory holding the Markdown articles
        production: Production or development build (defaults to config)
        progress: Whether to show progress bar
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
    """
    cfg = _load(config, articles, log_level, log_file)
    try:
        result = run_build(
            cfg,
            output_dir=output,
            production=production,
            show_progress=progress,
            console=console,
        )
    except SiteBuildError as exc:
        console.print(f"[red]Build failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        f"Site built: {result.output_dir} "
        f"({len(result.pages)} pages, {result.article_count} articles, {len(result.feeds)} feeds)"
    )


@app.command()
def feed(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory."),
    articles: Path | None = typer.Option(None, "--articles", "-a", help="Articles directory."),
):
    """Generate the RSS and JSON feeds without rendering pages."""
    cfg = _load(config, articles)
    try:
        paths = run_feed(cfg, output_dir=output)
    except SiteBuildError as exc:
        console.print(f"[red]Feed generation failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    for path in paths:
        console.print(f"Feed written: {path}")


@app.command("list")
def list_articles(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    articles: Path | None = typer.Option(None, "--articles", "-a", help="Articles directory."),
):
    """List articles newest first."""
    cfg = _load(config, articles)
    try:
        metadata = get_catalog(Path(cfg.build.articles_dir)).metadata()
    except SiteBuildError as exc:
        console.print(f"[red]Cannot load articles:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        clear_catalogs()

    table = Table("Date", "Slug", "Tag", "Title")
    for meta in metadata:
        table.add_row(format_date(meta.date), meta.slug, meta.tag, meta.title)
    console.print(table)


if __name__ == "__main__":
    app()
