"""Markdown to HTML conversion for article bodies and profile text."""

from __future__ import annotations

import markdown

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


def render_markdown(text: str) -> str:
    """Render Markdown to an HTML fragment."""
    if not text:
        return ""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS, output_format="html")
