"""Markdown parsing for mamd.

Builds a markdown-it parser configured for GitHub-flavored Markdown and
turns source text into a Document.

Parser configuration:
    - ``gfm-like`` preset: tables, strikethrough, autolinks (linkify), raw HTML
    - XHTML-style void elements (``<br />``, ``<hr />``, ``<img ... />``)
    - fence rule wrapped to record the source span of every code line
    - core rule assigning unique heading ids from slugified heading text

Parsing is total: any decoded text produces a Document. Only decoding
bytes can fail.

"""

from __future__ import annotations

import re
from collections.abc import Iterable
from types import MappingProxyType
from typing import TYPE_CHECKING

from markdown_it import MarkdownIt
from markdown_it.rules_block.fence import fence as fence_rule

from mamd.errors import ConversionError
from mamd.location import SourceSpan
from mamd.nodes import FENCE, Document, HeadingInfo
from mamd.utils.text import slugify, unique_slug

if TYPE_CHECKING:
    from markdown_it.rules_block import StateBlock
    from markdown_it.rules_core import StateCore
    from markdown_it.token import Token

    from mamd.plugins import MamdPlugin

PRESET = "gfm-like"
FALLBACK_SLUG = "heading"

# Same normalization markdown-it applies before block parsing, so spans
# computed at parse time index into Document.source unchanged.
_NEWLINES_RE = re.compile(r"\r\n?|\n")
_NULL_RE = re.compile(r"\0")

_HEADINGS_ENV_KEY = "mamd_headings"
_FENCE_ALT = ["paragraph", "reference", "blockquote", "list"]
_HEADING_TEXT_TYPES = frozenset({"text", "code_inline", "image"})


def decode_source(source: str | bytes, source_file: str | None = None) -> str:
    """Decode raw file contents as UTF-8 (a leading BOM is dropped)."""
    if isinstance(source, str):
        return source
    try:
        return source.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = f"Source is not valid UTF-8 ({exc.reason} at byte {exc.start})"
        raise ConversionError(msg, source_file=source_file) from exc


def normalize_source(source: str) -> str:
    """Normalize newlines to ``\\n`` and replace NUL with U+FFFD."""
    return _NULL_RE.sub("\ufffd", _NEWLINES_RE.sub("\n", source))


def _count_lines(content: str) -> int:
    if not content:
        return 0
    count = content.count("\n")
    if not content.endswith("\n"):
        count += 1
    return count


def _code_spans(state: StateBlock, token: Token) -> tuple[SourceSpan, ...]:
    """Compute the source span of every code line of a just-parsed fence.

    Mirrors the indent stripping of ``StateBlock.getLines`` so the spans
    select exactly the characters that form the code. A tab that is only
    partially consumed by the fence indent is kept in the span.
    """
    start_line = token.map[0] if token.map else state.line
    indent = state.sCount[start_line]
    src = state.src
    spans: list[SourceSpan] = []

    for line in range(start_line + 1, start_line + 1 + _count_lines(token.content)):
        line_start = first = state.bMarks[line]
        last = min(state.eMarks[line] + 1, len(src))
        line_indent = 0

        while first < last and line_indent < indent:
            ch = src[first]
            if ch == "\t":
                line_indent += 4 - (line_indent + state.bsCount[line]) % 4
            elif ch == " ":
                line_indent += 1
            elif first - line_start < state.tShift[line]:
                line_indent += 1
            else:
                break
            first += 1

        if line_indent > indent:
            first -= 1

        spans.append(SourceSpan(first, last))

    return tuple(spans)


def fence_with_spans(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
    """markdown-it fence rule that also stores line spans in ``token.meta``."""
    if not fence_rule(state, start_line, end_line, silent):
        return False
    if not silent:
        token = state.tokens[-1]
        if token.type == FENCE:
            token.meta["spans"] = _code_spans(state, token)
    return True


def _heading_text(inline: Token) -> str:
    parts: list[str] = []
    for child in inline.children or ():
        if child.type in _HEADING_TEXT_TYPES:
            parts.append(child.content)
    return "".join(parts)


def heading_ids(state: StateCore) -> None:
    """Core rule: give every heading a unique ``id`` attribute.

    Slugs repeat as ``intro``, ``intro-1``, ``intro-2``; an explicit id set
    by an earlier rule is kept and reserved.
    """
    seen: set[str] = set()
    headings: list[HeadingInfo] = []
    tokens = state.tokens

    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        text = _heading_text(tokens[idx + 1]) if idx + 1 < len(tokens) else ""
        explicit = token.attrGet("id")
        if explicit:
            slug = unique_slug(str(explicit), seen)
        else:
            slug = unique_slug(slugify(text) or FALLBACK_SLUG, seen)
        token.attrSet("id", slug)
        headings.append(HeadingInfo(level=int(token.tag[1:]), text=text, slug=slug))

    state.env[_HEADINGS_ENV_KEY] = tuple(headings)


def create_parser(plugins: Iterable[MamdPlugin] = ()) -> MarkdownIt:
    """Create a configured markdown-it instance.

    Args:
        plugins: Plugins whose ``extend_parser`` hook is applied in order

    Returns:
        MarkdownIt ready for ``parse``
    """
    md = MarkdownIt(PRESET, {"xhtmlOut": True, "html": True})
    md.block.ruler.at("fence", fence_with_spans, {"alt": _FENCE_ALT})
    md.core.ruler.push("heading_ids", heading_ids)
    for plugin in plugins:
        plugin.extend_parser(md)
    return md


def parse(md: MarkdownIt, source: str | bytes, *, source_file: str | None = None) -> Document:
    """Parse Markdown source into a Document.

    Args:
        md: Parser from :func:`create_parser`
        source: Markdown text, or raw UTF-8 bytes
        source_file: Optional source file path for error messages

    Returns:
        Document holding the normalized source and its token stream

    Raises:
        ConversionError: If ``source`` is bytes that are not valid UTF-8
    """
    text = normalize_source(decode_source(source, source_file))
    env: dict = {}
    tokens = md.parse(text, env)
    headings = env.pop(_HEADINGS_ENV_KEY, ())
    return Document(
        source=text,
        tokens=tuple(tokens),
        source_file=source_file,
        headings=headings,
        env=MappingProxyType(env),
    )
