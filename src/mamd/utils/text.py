"""Text processing utilities for mamd.

Provides the canonical slugify used for heading anchors.

Example:
    >>> from mamd.utils.text import slugify
    >>> slugify("Hello World!")
    'hello-world'
"""

from __future__ import annotations

import html as html_module
import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[-\s]+")


def slugify(text: str, unescape_html: bool = True) -> str:
    """Convert text to URL-safe slug with Unicode support.

    Preserves Unicode word characters (letters, digits, underscore) so that
    headings written in any script still get readable anchors.

    Args:
        text: Text to slugify
        unescape_html: Whether to decode HTML entities first (e.g., &amp; -> &)

    Returns:
        URL-safe slug (lowercase, with Unicode word chars and hyphens)

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Test &amp; Code")
        'test-code'
        >>> slugify("Café")
        'café'
    """
    if not text:
        return ""

    if unescape_html:
        text = html_module.unescape(text)

    text = text.lower().strip()
    text = _NON_WORD.sub("", text)
    text = _SEPARATORS.sub("-", text)
    return text.strip("-")


def unique_slug(slug: str, seen: set[str]) -> str:
    """Return ``slug`` or the first free ``slug-N`` and mark it as seen.

    Examples:
        >>> seen = set()
        >>> [unique_slug("intro", seen) for _ in range(3)]
        ['intro', 'intro-1', 'intro-2']
    """
    candidate = slug
    counter = 1
    while candidate in seen:
        candidate = f"{slug}-{counter}"
        counter += 1
    seen.add(candidate)
    return candidate
