"""Renderers for mamd documents.

- html: HtmlRenderer, the registry-driven HTML walker
- registry: NodeRenderer protocol, WalkStatus and the renderer registry
"""

from mamd.renderers.html import (
    BuiltinNodeRenderer,
    HtmlRenderer,
    RenderContext,
    create_default_registry,
)
from mamd.renderers.registry import (
    DEFAULT_PRIORITY,
    NodeRenderer,
    NodeRendererRegistry,
    NodeRendererRegistryBuilder,
    WalkStatus,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "BuiltinNodeRenderer",
    "HtmlRenderer",
    "NodeRenderer",
    "NodeRendererRegistry",
    "NodeRendererRegistryBuilder",
    "RenderContext",
    "WalkStatus",
    "create_default_registry",
]
