"""High-level Markdown processor combining parser and renderer."""

from __future__ import annotations

from collections.abc import Sequence

from mamd.highlighting import DEFAULT_STYLE
from mamd.nodes import Document
from mamd.parser import create_parser, parse
from mamd.plugins import DEFAULT_PLUGINS, MamdPlugin, resolve_plugins
from mamd.plugins.highlight import HighlightPlugin
from mamd.renderers.html import BuiltinNodeRenderer, HtmlRenderer
from mamd.renderers.registry import DEFAULT_PRIORITY, NodeRendererRegistryBuilder


class Markdown:
    """Markdown-to-HTML conversion pipeline.

    Usage:
        >>> md = Markdown()
        >>> md("# Hello **World**")
        '<h1 id="hello-world">Hello <strong>World</strong></h1>\\n'

        >>> # Access the parsed document
        >>> doc = md.parse("# Heading")
        >>> doc.headings[0].slug
        'heading'

        >>> # Custom plugin set
        >>> md = Markdown(plugins=["task_lists"])  # no highlighting

    Args:
        plugins: Plugin names or instances, applied in order. Defaults to
            task lists and syntax highlighting.
        style: Pygments style used when the highlight plugin is enabled by
            name (or by default)

    Thread Safety:
        The parser and renderer registry are built once and only read
        afterwards. Per-call state lives in the Document and RenderContext.
    """

    __slots__ = ("_md", "_plugins", "_renderer")

    def __init__(
        self,
        *,
        plugins: Sequence[str | MamdPlugin] | None = None,
        style: str = DEFAULT_STYLE,
    ) -> None:
        requested = list(DEFAULT_PLUGINS if plugins is None else plugins)
        # A highlight plugin enabled by name picks up the configured style
        requested = [
            HighlightPlugin(style=style) if entry == "highlight" else entry for entry in requested
        ]
        self._plugins = tuple(resolve_plugins(requested))
        self._md = create_parser(self._plugins)

        builder = NodeRendererRegistryBuilder()
        builder.register(BuiltinNodeRenderer(), priority=DEFAULT_PRIORITY)
        for plugin in self._plugins:
            plugin.extend_renderer(builder)
        self._renderer = HtmlRenderer(self._md, builder.build())

    @property
    def plugins(self) -> tuple[MamdPlugin, ...]:
        return self._plugins

    @property
    def renderer(self) -> HtmlRenderer:
        return self._renderer

    def __call__(self, source: str | bytes) -> str:
        """Parse and render Markdown in one call."""
        return self.convert(source)

    def parse(self, source: str | bytes, *, source_file: str | None = None) -> Document:
        """Parse Markdown source into a Document.

        Raises:
            ConversionError: If ``source`` is bytes that are not valid UTF-8
        """
        return parse(self._md, source, source_file=source_file)

    def render(self, doc: Document) -> str:
        """Render a Document to an HTML fragment.

        Raises:
            RenderError: If a node renderer (e.g. the highlighter) fails
        """
        return self._renderer.render(doc)

    def convert(self, source: str | bytes, *, source_file: str | None = None) -> str:
        """Convert Markdown source to an HTML fragment.

        Args:
            source: Markdown text or raw UTF-8 bytes
            source_file: Optional path used in error messages

        Returns:
            HTML fragment

        Raises:
            ConversionError: On undecodable input or a failing node renderer
        """
        return self.render(self.parse(source, source_file=source_file))
