"""
Article input sources.

This package reads raw article records from where they are authored.
"""

from .source import ArticleSource, DirectorySource, StaticSource

__all__ = ["ArticleSource", "DirectorySource", "StaticSource"]
