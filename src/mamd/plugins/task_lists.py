"""Task list plugin for mamd.

Adds support for GFM task list items:

    - [ ] todo
    - [x] done

Items render as ``<li class="task-list-item">`` with a disabled checkbox.
Parsing is delegated to mdit-py-plugins' ``tasklists`` core rule.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdit_py_plugins.tasklists import tasklists_plugin

from mamd.plugins import register_plugin

if TYPE_CHECKING:
    from markdown_it import MarkdownIt

    from mamd.renderers.registry import NodeRendererRegistryBuilder


@register_plugin("task_lists")
class TaskListPlugin:
    """Plugin adding ``- [ ]`` / ``- [x]`` checkboxes."""

    __slots__ = ("_enabled",)

    def __init__(self, *, enabled: bool = False) -> None:
        # enabled=True renders clickable checkboxes
        self._enabled = enabled

    @property
    def name(self) -> str:
        return "task_lists"

    def extend_parser(self, md: MarkdownIt) -> None:
        md.use(tasklists_plugin, enabled=self._enabled)

    def extend_renderer(self, builder: NodeRendererRegistryBuilder) -> None:
        """No renderer extension needed - emits html_inline tokens."""
        pass
