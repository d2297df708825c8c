"""
mamd: Markdown tree to HTML site converter

Walks a directory of Markdown files and writes a mirrored tree of HTML
pages. Markdown is parsed with markdown-it-py (GFM tables, strikethrough,
autolinks, task lists), fenced code is highlighted with Pygments using
inline styles, and each fragment is wrapped in a Jinja2 page template.

Quick Start:
    >>> from mamd import convert
    >>> convert("# Hello, World!")
    '<h1 id="hello-world">Hello, World!</h1>\\n'

    >>> # Or use the Markdown class directly
    >>> from mamd import Markdown
    >>> md = Markdown(style="monokai")
    >>> html = md("```go\\nfunc main() {}\\n```")

Building a Site:
    >>> from pathlib import Path
    >>> from mamd import BuildConfig, build_site
    >>> report = build_site(BuildConfig(input_root=Path("docs"), output_root=Path("site")))
    >>> report.ok
    True

Custom Node Renderers:
    >>> from mamd import Markdown, WalkStatus
    >>> class QuietFence:
    ...     kinds = frozenset({"fence"})
    ...     def on_enter(self, ctx, node):
    ...         ctx.out.append("<pre>hidden</pre>\\n")
    ...         return WalkStatus.SKIP_CHILDREN
    ...     def on_leave(self, ctx, node):
    ...         return WalkStatus.CONTINUE

Command Line:
    mamd -i docs -o site
"""

from mamd.build import BuildReport, FileFailure, FileTask, SiteBuilder, build_site, discover
from mamd.config import BuildConfig
from mamd.errors import (
    BuildError,
    ConversionError,
    HighlightError,
    MamdError,
    PluginError,
    RenderError,
    StylesheetError,
    TemplateLoadError,
    TraversalError,
)
from mamd.highlighting import Highlighter, PygmentsHighlighter, highlight
from mamd.location import SourceSpan
from mamd.markdown import Markdown
from mamd.nodes import Document, FencedCode, HeadingInfo
from mamd.renderers import (
    HtmlRenderer,
    NodeRenderer,
    NodeRendererRegistry,
    NodeRendererRegistryBuilder,
    RenderContext,
    WalkStatus,
)
from mamd.template import PageTemplate, load_template

__version__ = "0.1.0"

# Default pipeline, built on first use by convert()
_default_markdown: Markdown | None = None


def convert(source: str | bytes, *, source_file: str | None = None) -> str:
    """Convert Markdown source to an HTML fragment with the default pipeline.

    Args:
        source: Markdown text or raw UTF-8 bytes
        source_file: Optional path used in error messages

    Returns:
        HTML fragment
    """
    global _default_markdown
    if _default_markdown is None:
        _default_markdown = Markdown()
    return _default_markdown.convert(source, source_file=source_file)


__all__ = [
    # Version
    "__version__",
    # High-level API
    "Markdown",
    "convert",
    "highlight",
    # Build
    "BuildConfig",
    "BuildReport",
    "FileFailure",
    "FileTask",
    "SiteBuilder",
    "build_site",
    "discover",
    "PageTemplate",
    "load_template",
    # Document model
    "Document",
    "FencedCode",
    "HeadingInfo",
    "SourceSpan",
    # Rendering
    "HtmlRenderer",
    "NodeRenderer",
    "NodeRendererRegistry",
    "NodeRendererRegistryBuilder",
    "RenderContext",
    "WalkStatus",
    # Highlighting
    "Highlighter",
    "PygmentsHighlighter",
    # Errors
    "MamdError",
    "ConversionError",
    "RenderError",
    "HighlightError",
    "PluginError",
    "TemplateLoadError",
    "StylesheetError",
    "BuildError",
    "TraversalError",
]
