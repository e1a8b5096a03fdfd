"""
Error taxonomy for the site build.

Every error raised by the article pipeline derives from SiteBuildError so the
CLI can report build failures uniformly. None of them are retried: generation
happens ahead of time and a failure aborts the build.
"""

from __future__ import annotations

from pathlib import Path


class SiteBuildError(Exception):
    """Base class for failures that abort a site build."""


class LoadError(SiteBuildError, ValueError):
    """An article source record is malformed or incomplete."""

    def __init__(self, message: str, source: Path | str | None = None):
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class FormatError(SiteBuildError, ValueError):
    """A value could not be parsed as a calendar date."""


class WriteError(SiteBuildError, OSError):
    """An output file could not be written."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)
