"""Markdown rendering for Mobsite.

Free-form copy (mob descriptions, the join page) is written in Markdown and
converted to HTML with mistune.
"""

from __future__ import annotations

import re

import mistune
from markupsafe import Markup

from .html_utils import escape_html


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _CopyRenderer(mistune.HTMLRenderer):
    """HTML renderer adding anchor IDs to headings."""

    def __init__(self):
        super().__init__(escape=False)
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        base_id = _generate_heading_id(text)
        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        lang_class = f' class="language-{escape_html(info)}"' if info else ""
        return f"<pre><code{lang_class}>{escape_html(code)}</code></pre>\n"


def markdown_to_html(text: str) -> Markup:
    """Render Markdown to HTML.

    Args:
        text: Markdown source.

    Returns:
        Markup-safe HTML string.
    """
    markdown = mistune.create_markdown(
        renderer=_CopyRenderer(), plugins=["strikethrough", "table", "url"]
    )
    return Markup(markdown(text))
