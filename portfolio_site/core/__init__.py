"""
Core domain models and date handling.

The ArticleCatalog lives in ``core.articles`` and is imported from there
directly, since it depends on the input sources.
"""

from .dates import format_date, iso_datetime, parse_date, rfc822_date
from .errors import FormatError, LoadError, SiteBuildError, WriteError
from .types import Article, ArticleMeta, Project, Skill, SkillGroup, SocialLink

__all__ = [
    "Article",
    "ArticleMeta",
    "Project",
    "Skill",
    "SkillGroup",
    "SocialLink",
    "SiteBuildError",
    "LoadError",
    "FormatError",
    "WriteError",
    "format_date",
    "parse_date",
    "rfc822_date",
    "iso_datetime",
]
