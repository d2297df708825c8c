"""HTML renderer with pluggable node renderers.

Walks a Document's token tree and dispatches enter and leave events to the
node renderer the registry resolves for each node kind. Output accumulates
in a StringBuilder owned by the render call.

The built-in renderer is a thin adapter over markdown-it's own HTML
rendering rules, so every node kind without an override renders exactly as
markdown-it would render it.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can share a single HtmlRenderer instance.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mamd.errors import RenderError
from mamd.nodes import INLINE, WILDCARD, Document, node_kind, token_lineno
from mamd.renderers.registry import (
    DEFAULT_PRIORITY,
    NodeRenderer,
    NodeRendererRegistry,
    NodeRendererRegistryBuilder,
    WalkStatus,
)
from mamd.utils.logger import get_logger
from mamd.utils.stringbuilder import StringBuilder

if TYPE_CHECKING:
    from markdown_it import MarkdownIt
    from markdown_it.renderer import RendererHTML
    from markdown_it.token import Token

logger = get_logger(__name__)


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Attributes:
        document: Document being rendered
        out: Output buffer for the HTML fragment
        renderer: markdown-it renderer used for built-in rendering
        options: markdown-it options
        env: Private copy of the parser environment
        siblings: Token sequence the walker is currently in
        index: Position of the current token in ``siblings``
        lineno: 1-based line of the innermost block token seen so far
    """

    document: Document
    out: StringBuilder
    renderer: RendererHTML
    options: Any
    env: dict[str, Any] = field(default_factory=dict)
    siblings: Sequence[Token] = ()
    index: int = 0
    lineno: int | None = None

    @property
    def source(self) -> str:
        return self.document.source

    def render_builtin(self) -> str:
        """Render the current token with markdown-it's own rules."""
        rules = self.renderer.rules
        token = self.siblings[self.index]
        if token.type in rules:
            return rules[token.type](self.siblings, self.index, self.options, self.env)
        return self.renderer.renderToken(self.siblings, self.index, self.options, self.env)


class BuiltinNodeRenderer:
    """Fallback renderer for every node kind, backed by markdown-it."""

    __slots__ = ()

    @property
    def kinds(self) -> frozenset[str]:
        return frozenset({WILDCARD})

    def on_enter(self, ctx: RenderContext, node: Token) -> WalkStatus:
        # Inline containers produce no markup of their own
        if node.type != INLINE:
            ctx.out.append(ctx.render_builtin())
        return WalkStatus.CONTINUE

    def on_leave(self, ctx: RenderContext, node: Token) -> WalkStatus:
        if node.nesting == -1:
            ctx.out.append(ctx.render_builtin())
        return WalkStatus.CONTINUE


def create_default_registry() -> NodeRendererRegistry:
    """Registry containing only the built-in renderer."""
    return NodeRendererRegistryBuilder().register(BuiltinNodeRenderer(), DEFAULT_PRIORITY).build()


def _matching_close(tokens: Sequence[Token], start: int) -> int:
    depth = 0
    for idx in range(start, len(tokens)):
        depth += tokens[idx].nesting
        if depth == 0:
            return idx
    return len(tokens)


class HtmlRenderer:
    """Render a Document to an HTML fragment.

    Usage:
        >>> md = create_parser()
        >>> doc = parse(md, "# Hello **World**")
        >>> HtmlRenderer(md, create_default_registry()).render(doc)
        '<h1 id="hello-world">Hello <strong>World</strong></h1>\\n'

    Walk semantics:
        - opening and leaf tokens dispatch ``on_enter``
        - closing and leaf tokens dispatch ``on_leave``
        - SKIP_CHILDREN jumps to the matching closing token, whose
          ``on_leave`` still runs
        - STOP ends the walk; output produced so far is kept
        - an ``inline`` token's children are walked as a nested sequence
    """

    __slots__ = ("_md", "_registry")

    def __init__(self, md: MarkdownIt, registry: NodeRendererRegistry | None = None) -> None:
        """Initialize renderer.

        Args:
            md: Parser whose renderer rules and options drive built-in rendering
            registry: Node renderers (defaults to built-in rendering only)
        """
        self._md = md
        self._registry = registry or create_default_registry()

    @property
    def registry(self) -> NodeRendererRegistry:
        return self._registry

    def render(self, doc: Document) -> str:
        """Render document to HTML string.

        Raises:
            RenderError: If a node renderer fails
        """
        ctx = RenderContext(
            document=doc,
            out=StringBuilder(),
            renderer=self._md.renderer,
            options=self._md.options,
            env=dict(doc.env),
        )
        if not self._walk(ctx, doc.tokens):
            logger.debug("Render of %s stopped early", doc.source_file or "<string>")
        return ctx.out.build()

    def _walk(self, ctx: RenderContext, tokens: Sequence[Token]) -> bool:
        """Walk a token sequence; return False once a renderer says STOP."""
        idx = 0
        count = len(tokens)
        while idx < count:
            token = tokens[idx]
            ctx.siblings = tokens
            ctx.index = idx
            if token.map:
                ctx.lineno = token_lineno(token)
            renderer = self._lookup(ctx, token)

            if token.nesting == -1:
                if self._dispatch(ctx, renderer, token, entering=False) is WalkStatus.STOP:
                    return False
                idx += 1
                continue

            status = self._dispatch(ctx, renderer, token, entering=True)
            if status is WalkStatus.STOP:
                return False

            if status is WalkStatus.CONTINUE and token.type == INLINE and token.children:
                if not self._walk(ctx, token.children):
                    return False
                ctx.siblings = tokens
                ctx.index = idx

            if token.nesting == 1:
                if status is WalkStatus.SKIP_CHILDREN:
                    idx = _matching_close(tokens, idx)
                else:
                    idx += 1
                continue

            if self._dispatch(ctx, renderer, token, entering=False) is WalkStatus.STOP:
                return False
            idx += 1
        return True

    def _lookup(self, ctx: RenderContext, token: Token) -> NodeRenderer:
        kind = node_kind(token)
        renderer = self._registry.get(kind)
        if renderer is None:
            raise RenderError(
                f"No renderer registered for node kind {kind!r}",
                lineno=ctx.lineno,
                source_file=ctx.document.source_file,
            )
        return renderer

    def _dispatch(
        self, ctx: RenderContext, renderer: NodeRenderer, token: Token, *, entering: bool
    ) -> WalkStatus:
        try:
            if entering:
                return renderer.on_enter(ctx, token)
            return renderer.on_leave(ctx, token)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(
                f"{type(renderer).__name__} failed on {node_kind(token)!r}: {exc}",
                lineno=ctx.lineno,
                source_file=ctx.document.source_file,
            ) from exc
