"""
Article sources.

Articles are authored as Markdown files with YAML front matter, laid out as
either ``<slug>/index.md`` or ``<slug>.md`` under an articles directory:

    ---
    title: Building a Solana program
    date: 2024-06-15
    description: Notes from the bootcamp.
    tag: solana
    ---
    Body in Markdown...

Sources only read raw records; validation and ordering belong to the
ArticleCatalog.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

import frontmatter
import yaml

from ..core.errors import LoadError

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("title", "date", "description", "tag", "author")


class ArticleSource(Protocol):
    """Anything that can produce raw article records."""

    def read(self) -> list[dict[str, Any]]:
        ...


class StaticSource:
    """In-memory source of raw article records."""

    def __init__(self, records: Iterable[dict[str, Any]]):
        self._records = [dict(record) for record in records]

    def read(self) -> list[dict[str, Any]]:
        return [dict(record) for record in self._records]


class DirectorySource:
    """Reads Markdown articles from a directory tree.

    Attributes:
        root: Directory holding the article files
        encoding: Text encoding used to read files
    """

    def __init__(self, root: Path, encoding: str = "utf-8"):
        self.root = Path(root)
        self.encoding = encoding

    def read(self) -> list[dict[str, Any]]:
        """Read every article file under ``root``.

        Returns:
            Raw record dicts with ``slug``, ``content`` and ``source_path`` set
            alongside the front-matter fields.

        Raises:
            LoadError: If the directory is missing or a file cannot be parsed.
        """
        if not self.root.is_dir():
            raise LoadError("Articles directory does not exist", self.root)

        records = []
        for slug, path in self._discover():
            record = self._read_file(slug, path)
            if record is not None:
                records.append(record)
        logger.debug("Read %d article record(s) from %s", len(records), self.root)
        return records

    def _discover(self) -> list[tuple[str, Path]]:
        found: list[tuple[str, Path]] = []
        for path in sorted(self.root.glob("*/index.md")):
            if _is_hidden(path.parent.name):
                continue
            found.append((path.parent.name, path))
        for path in sorted(self.root.glob("*.md")):
            if _is_hidden(path.name) or not path.is_file():
                continue
            found.append((path.stem, path))
        return found

    def _read_file(self, slug: str, path: Path) -> dict[str, Any] | None:
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"Cannot read article: {exc}", path) from exc
        try:
            post = frontmatter.loads(text)
        except (yaml.YAMLError, ValueError) as exc:
            raise LoadError(f"Invalid front matter: {exc}", path) from exc

        metadata = post.metadata
        if not isinstance(metadata, dict):
            raise LoadError("Front matter must be a mapping", path)
        if metadata.get("draft") is True:
            logger.info("Skipping draft article %s", path)
            return None

        record: dict[str, Any] = {key: metadata[key] for key in RECORD_FIELDS if key in metadata}
        record["slug"] = slug
        record["content"] = post.content
        record["source_path"] = path
        return record


def _is_hidden(name: str) -> bool:
    return name.startswith(("_", "."))
