"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SiteConfig: Site identity used in page heads and feed headers
- ProfileConfig: Biographical content, social links, skills and projects
- BuildConfig: Article source and output locations, production flag
- FeedConfig: RSS / JSON Feed output settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

import yaml

from .core.types import Project, Skill, SkillGroup, SocialLink


@dataclass
class SiteConfig:
    """Site identity.

    Attributes:
        title: Site title used in page heads and as the feed title
        description: Site description used in meta tags and the feed header
        base_url: Absolute site URL without trailing slash; article links are
            ``{base_url}/articles/{slug}``
        language: Language code for the html element and the feed
        author_name: Default author shown in feeds
        author_email: Author email; RSS items only carry an author when set
        copyright: Optional copyright line for the feed header
    """

    title: str = "My Portfolio"
    description: str = "Writing on technology and other interests."
    base_url: str = "http://localhost:8000"
    language: str = "en"
    author_name: str = ""
    author_email: str | None = None
    copyright: str | None = None


@dataclass
class ProfileConfig:
    """Biographical content rendered on the home, about and projects pages.

    Attributes:
        name: Person's display name
        headline: Large heading on the home page
        intro: Markdown paragraph below the home headline
        about_heading: Large heading on the about page
        about_paragraphs: Markdown paragraphs for the about page
        email: Contact email shown on the about page
        social_links: Links rendered on the home and about pages
        skill_groups: Sidebar lists on the home page (e.g. languages, tools)
        projects: Entries on the projects page
        home_article_limit: Number of recent articles on the home page
        articles_title: Heading of the articles index
        articles_intro: Intro text of the articles index
        projects_title: Heading of the projects page
        projects_intro: Intro text of the projects page
    """

    name: str = ""
    headline: str = ""
    intro: str = ""
    about_heading: str = ""
    about_paragraphs: list[str] = field(default_factory=list)
    email: str | None = None
    social_links: list[SocialLink] = field(default_factory=list)
    skill_groups: list[SkillGroup] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    home_article_limit: int = 4
    articles_title: str = "Writing on technology and other interests."
    articles_intro: str = ""
    projects_title: str = "My projects over the years."
    projects_intro: str = ""


@dataclass
class BuildConfig:
    """Build locations and mode.

    Attributes:
        articles_dir: Directory holding ``<slug>/index.md`` or ``<slug>.md`` files
        output_dir: Directory the static site is written to
        production: Whether feeds are generated; development builds skip them
    """

    articles_dir: str = "content/articles"
    output_dir: str = "public"
    production: bool = False


@dataclass
class FeedConfig:
    """Configuration for feed generation.

    Attributes:
        directory: Subdirectory of the output dir holding the feed files
        rss_filename: RSS 2.0 file name
        json_filename: JSON Feed file name
        json_enabled: Whether to also write the JSON Feed
        include_content: Whether items embed the rendered article body
    """

    directory: str = "rss"
    rss_filename: str = "feed.xml"
    json_filename: str = "feed.json"
    json_enabled: bool = True
    include_content: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the build log file, written next to the output dir
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "build.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    site: SiteConfig = field(default_factory=SiteConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data or value is None:
            continue
        if not isinstance(value, dict):
            raise ValueError(f"Config section {key!r} must be a mapping")
        section = data[key]
        section.update({k: v for k, v in value.items() if k in section})
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    site = SiteConfig(**data["site"])
    site.base_url = site.base_url.rstrip("/")

    profile = dict(data["profile"])
    profile["about_paragraphs"] = [str(p) for p in profile.get("about_paragraphs") or []]
    profile["social_links"] = [
        _record(SocialLink, item) for item in profile.get("social_links") or []
    ]
    profile["projects"] = [_record(Project, item) for item in profile.get("projects") or []]
    groups = []
    for group in profile.get("skill_groups") or []:
        skill_group = _record(SkillGroup, group)
        skill_group.items = [_record(Skill, item) for item in skill_group.items or []]
        groups.append(skill_group)
    profile["skill_groups"] = groups

    return AppConfig(
        site=site,
        profile=ProfileConfig(**profile),
        build=BuildConfig(**data["build"]),
        feed=FeedConfig(**data["feed"]),
        logging=LoggingConfig(**data["logging"]),
    )


def _record(cls: type, raw: Any) -> Any:
    """Build a profile record from a YAML mapping, ignoring unknown keys."""
    if not isinstance(raw, dict):
        raise ValueError(f"{cls.__name__} entry must be a mapping, got {raw!r}")
    known = {f.name for f in fields(cls)}
    try:
        return cls(**{key: value for key, value in raw.items() if key in known})
    except TypeError as exc:
        raise ValueError(f"Invalid {cls.__name__} entry {raw!r}: {exc}") from exc
