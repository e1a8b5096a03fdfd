"""
Core data types for the portfolio site.

This module defines the structures shared across the build:
- Article: A fully loaded article including its Markdown body
- ArticleMeta: The content-free view handed to listings and feeds
- SocialLink, Skill, SkillGroup, Project: Profile records from configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ArticleMeta:
    """Metadata view of an article.

    Attributes:
        slug: Unique URL-safe identifier derived from the source location
        title: Display title
        date: ISO-8601 calendar date (YYYY-MM-DD)
        description: Short summary shown in listings and feeds
        tag: Short categorical label
        author: Optional author name from front matter
    """
    slug: str
    title: str
    date: str
    description: str = ""
    tag: str = ""
    author: str | None = None


@dataclass(frozen=True)
class Article:
    """A loaded article with its Markdown body.

    Instances are immutable; the catalog hands out the same objects for the
    lifetime of a build.

    Attributes:
        slug: Unique URL-safe identifier derived from the source location
        title: Display title
        date: ISO-8601 calendar date (YYYY-MM-DD), normalised at load time
        description: Short summary shown in listings and feeds
        tag: Short categorical label
        author: Optional author name from front matter
        content: Markdown body; never part of the metadata view
        source_path: File the record was read from, if any
    """
    slug: str
    title: str
    date: str
    description: str = ""
    tag: str = ""
    author: str | None = None
    content: str = field(default="", repr=False)
    source_path: Path | None = field(default=None, compare=False)

    def meta(self) -> ArticleMeta:
        """Return the metadata view of this article without its body."""
        return ArticleMeta(
            slug=self.slug,
            title=self.title,
            date=self.date,
            description=self.description,
            tag=self.tag,
            author=self.author,
        )


@dataclass
class SocialLink:
    label: str
    url: str
    icon: str = "link"


@dataclass
class Skill:
    name: str
    url: str = ""


@dataclass
class SkillGroup:
    title: str
    icon: str = "code"
    items: list[Skill] = field(default_factory=list)


@dataclass
class Project:
    name: str
    description: str
    link_url: str = ""
    link_label: str = ""
