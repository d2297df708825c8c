"""Plugin system for mamd.

Plugins extend the conversion pipeline at two extension points:

1. Parser plugins (task_lists):
   - ``extend_parser`` receives the markdown-it instance
   - add block, inline or core rules

2. Renderer plugins (highlight):
   - ``extend_renderer`` receives the NodeRendererRegistryBuilder
   - register node renderers that override built-in rendering for a
     node kind at some priority

Usage:
    >>> from mamd import Markdown
    >>>
    >>> # Built-in plugins by name
    >>> md = Markdown(plugins=["task_lists", "highlight"])
    >>>
    >>> # Or configured instances
    >>> from mamd.plugins.highlight import HighlightPlugin
    >>> md = Markdown(plugins=["task_lists", HighlightPlugin(style="monokai")])

Thread Safety:
All plugins are stateless after construction. Multiple Markdown instances
can share plugin instances.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mamd.errors import PluginError

if TYPE_CHECKING:
    from markdown_it import MarkdownIt

    from mamd.renderers.registry import NodeRendererRegistryBuilder

__all__ = [
    "BUILTIN_PLUGINS",
    "DEFAULT_PLUGINS",
    "MamdPlugin",
    "PluginError",
    "get_plugin",
    "register_plugin",
    "resolve_plugins",
]

DEFAULT_PLUGINS = ("task_lists", "highlight")


@runtime_checkable
class MamdPlugin(Protocol):
    """Protocol for mamd plugins."""

    @property
    def name(self) -> str:
        """Plugin identifier."""
        ...

    def extend_parser(self, md: MarkdownIt) -> None:
        """Add parsing rules. Called once per Markdown instance."""
        ...

    def extend_renderer(self, builder: NodeRendererRegistryBuilder) -> None:
        """Register node renderers. Called once per Markdown instance."""
        ...


# Registry of built-in plugins
BUILTIN_PLUGINS: dict[str, type[MamdPlugin]] = {}


def register_plugin(
    name: str,
) -> Callable[[type[MamdPlugin]], type[MamdPlugin]]:
    """Decorator to register a plugin.

    Usage:
        @register_plugin("highlight")
        class HighlightPlugin:
                ...
    """

    def decorator(cls: type[MamdPlugin]) -> type[MamdPlugin]:
        BUILTIN_PLUGINS[name] = cls
        return cls

    return decorator


def get_plugin(name: str) -> MamdPlugin:
    """Get a default-configured plugin instance by name.

    Raises:
        PluginError: If plugin name is not recognized
    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS.keys()))
        raise PluginError(name, f"unknown plugin. Available: {available}")
    return BUILTIN_PLUGINS[name]()


def resolve_plugins(plugins: Iterable[str | MamdPlugin]) -> list[MamdPlugin]:
    """Turn plugin names and instances into instances.

    ``"all"`` expands to every built-in plugin not otherwise listed.
    """
    resolved: list[MamdPlugin] = []
    seen: set[str] = set()
    expand_all = False
    for entry in plugins:
        if entry == "all":
            expand_all = True
            continue
        plugin = get_plugin(entry) if isinstance(entry, str) else entry
        if not isinstance(plugin, MamdPlugin):
            raise PluginError(type(plugin).__name__, "does not implement the MamdPlugin protocol")
        if plugin.name in seen:
            raise PluginError(plugin.name, "enabled more than once")
        seen.add(plugin.name)
        resolved.append(plugin)
    if expand_all:
        resolved.extend(get_plugin(name) for name in BUILTIN_PLUGINS if name not in seen)
    return resolved


# Import built-in plugins to register them
# These imports trigger the @register_plugin decorators
from mamd.plugins.highlight import HighlightPlugin  # noqa: E402
from mamd.plugins.task_lists import TaskListPlugin  # noqa: E402

__all__ += [
    "HighlightPlugin",
    "TaskListPlugin",
]
