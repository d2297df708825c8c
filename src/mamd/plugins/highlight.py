"""Syntax highlighting plugin for mamd.

Registers FencedCodeRenderer for the ``fence`` node kind ahead of the
built-in renderer. Each fenced block's text is rebuilt from its source
spans and handed to a Highlighter; the highlighter's HTML replaces
markdown-it's default ``<pre><code>`` output.

Usage:
    >>> md = Markdown(plugins=[HighlightPlugin(style="monokai")])
    >>> md("```go\\nfunc f(){}\\n```")
    '<div class="highlight" style="...'

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mamd.errors import HighlightError
from mamd.highlighting import DEFAULT_STYLE, Highlighter, PygmentsHighlighter, SimpleHighlighter
from mamd.nodes import FENCE, FencedCode
from mamd.plugins import register_plugin
from mamd.renderers.registry import WalkStatus

if TYPE_CHECKING:
    from markdown_it import MarkdownIt
    from markdown_it.token import Token

    from mamd.renderers.html import RenderContext
    from mamd.renderers.registry import NodeRendererRegistryBuilder

# Must beat DEFAULT_PRIORITY (lower wins)
HIGHLIGHT_PRIORITY = 500


class FencedCodeRenderer:
    """Node renderer that highlights fenced code blocks."""

    __slots__ = ("_highlighter",)

    def __init__(self, highlighter: Highlighter | SimpleHighlighter) -> None:
        self._highlighter = highlighter

    @property
    def kinds(self) -> frozenset[str]:
        return frozenset({FENCE})

    def on_enter(self, ctx: RenderContext, node: Token) -> WalkStatus:
        block = FencedCode.from_token(node)
        code = block.get_code(ctx.source)
        try:
            html = self._highlight(code, block.language)
        except HighlightError as exc:
            if exc.lineno is not None:
                raise
            raise HighlightError(
                exc.message, lineno=block.lineno, source_file=ctx.document.source_file
            ) from exc
        except Exception as exc:
            raise HighlightError(
                f"Highlighting failed: {exc}",
                lineno=block.lineno,
                source_file=ctx.document.source_file,
            ) from exc

        ctx.out.append(html)
        if not html.endswith("\n"):
            ctx.out.append("\n")
        # The block is fully emitted; nothing below it to render
        return WalkStatus.SKIP_CHILDREN

    def on_leave(self, ctx: RenderContext, node: Token) -> WalkStatus:
        return WalkStatus.CONTINUE

    def _highlight(self, code: str, language: str) -> str:
        highlighter = self._highlighter
        if hasattr(highlighter, "highlight") and callable(highlighter.highlight):
            return highlighter.highlight(code, language)
        return highlighter(code, language)


@register_plugin("highlight")
class HighlightPlugin:
    """Plugin routing fenced code blocks through a syntax highlighter.

    Args:
        highlighter: Highlighter (or ``(code, language) -> html`` callable);
            defaults to a PygmentsHighlighter using ``style``
        style: Pygments style name for the default highlighter
        priority: Registration priority for the fence renderer
    """

    __slots__ = ("_highlighter", "_priority")

    def __init__(
        self,
        highlighter: Highlighter | SimpleHighlighter | None = None,
        *,
        style: str = DEFAULT_STYLE,
        priority: int = HIGHLIGHT_PRIORITY,
    ) -> None:
        self._highlighter = highlighter or PygmentsHighlighter(style=style)
        self._priority = priority

    @property
    def name(self) -> str:
        return "highlight"

    @property
    def highlighter(self) -> Highlighter | SimpleHighlighter:
        return self._highlighter

    def extend_parser(self, md: MarkdownIt) -> None:
        """No parser extension needed - fences are core syntax."""
        pass

    def extend_renderer(self, builder: NodeRendererRegistryBuilder) -> None:
        builder.register(FencedCodeRenderer(self._highlighter), priority=self._priority)
