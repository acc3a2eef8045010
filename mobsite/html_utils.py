"""HTML utility functions for Mobsite.

Functions:
    escape_html: Escape special HTML characters in a string.
    classes: Compose a class attribute value from several class lists.
"""

from __future__ import annotations


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Converts the following characters to their HTML entity equivalents:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for inclusion in HTML.

    Examples:
        >>> escape_html('<script>alert("XSS")</script>')
        '&lt;script&gt;alert(&quot;XSS&quot;)&lt;/script&gt;'

        >>> escape_html('Tom & Jerry')
        'Tom &amp; Jerry'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def classes(*groups: str | None) -> str:
    """Join class lists into one attribute value, dropping repeats.

    Args:
        *groups: Whitespace-separated class lists. Empty or None entries
            are skipped.

    Returns:
        Space-separated classes in first-seen order.

    Examples:
        >>> classes("flex gap-6", "flex grow")
        'flex gap-6 grow'
    """
    seen: list[str] = []
    for group in groups:
        for name in (group or "").split():
            if name not in seen:
                seen.append(name)
    return " ".join(seen)
