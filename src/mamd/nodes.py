"""Document model for mamd.

A parsed document is markdown-it's block token stream: an ordered,
flattened tree where ``*_open``/``*_close`` token pairs delimit containers
and ``inline`` tokens carry their inline children. mamd wraps that stream
in a frozen Document together with the normalized source it was parsed
from, and exposes typed views for the nodes it needs to reason about.

Node kinds are token types with the ``_open``/``_close`` suffix removed:

    heading_open / heading_close  -> "heading"
    fence                         -> "fence"
    s_open / s_close              -> "s"        (strikethrough)
    inline                        -> "inline"

Thread Safety:
Documents are frozen and never mutated after parsing; renderers only read
them.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from markdown_it.common.utils import unescapeAll
from markdown_it.token import Token

from mamd.location import SourceSpan, join_spans

FENCE = "fence"
INLINE = "inline"
WILDCARD = "*"

_SUFFIXES = ("_open", "_close")


def node_kind(token: Token) -> str:
    """Return the node kind of ``token``.

    Examples:
        >>> node_kind(Token("heading_open", "h1", 1))
        'heading'
        >>> node_kind(Token("fence", "code", 0))
        'fence'
    """
    kind = token.type
    for suffix in _SUFFIXES:
        if kind.endswith(suffix):
            return kind[: -len(suffix)]
    return kind


def token_lineno(token: Token) -> int | None:
    """1-based starting line of a block token, if the parser recorded one."""
    if token.map:
        return token.map[0] + 1
    return None


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    """Heading metadata collected while assigning heading ids."""

    level: int
    text: str
    slug: str


@dataclass(frozen=True, slots=True)
class FencedCode:
    """Typed view of a fenced code block.

    Attributes:
        info: Raw info string after the opening fence (entities decoded)
        language: First word of the info string, or "" when absent
        spans: One span per code line, in document order
        lineno: 1-based line of the opening fence (None if unknown)
    """

    info: str
    language: str
    spans: tuple[SourceSpan, ...]
    lineno: int | None = None

    @classmethod
    def from_token(cls, token: Token) -> FencedCode:
        """Build the view from a ``fence`` token produced by mamd's parser."""
        info = unescapeAll(token.info).strip() if token.info else ""
        language = info.split(maxsplit=1)[0] if info else ""
        spans = tuple(token.meta.get("spans", ()))
        return cls(info=info, language=language, spans=spans, lineno=token_lineno(token))

    def get_code(self, source: str) -> str:
        """Concatenate the line spans against ``source``.

        The result is the exact original code text, whitespace included.
        """
        return join_spans(source, self.spans)


@dataclass(frozen=True, slots=True)
class Document:
    """Parsed Markdown document.

    Attributes:
        source: Normalized source text all spans refer to
        tokens: Block-level token stream
        source_file: Optional path used in error messages
        headings: Headings in document order with their assigned ids
        env: Read-only parser environment (link references), handed to
            markdown-it render rules
    """

    source: str
    tokens: tuple[Token, ...]
    source_file: str | None = None
    headings: tuple[HeadingInfo, ...] = ()
    env: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def fenced_code_blocks(self) -> Iterator[FencedCode]:
        """Yield a FencedCode view for every fenced block, in order."""
        for token in self.tokens:
            if token.type == FENCE:
                yield FencedCode.from_token(token)

    def kinds(self) -> Sequence[str]:
        """Node kinds of the block token stream (closing tokens excluded)."""
        return [node_kind(token) for token in self.tokens if token.nesting != -1]
