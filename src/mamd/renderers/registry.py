"""Node renderer registry for handler lookup and registration.

The registry maps node kinds to prioritized node renderers. The HTML
renderer asks it which renderer handles each node it walks, so new node
kinds are supported by registering a renderer, without touching the walker.

Priorities are relative ordering keys: for a given kind the renderer with
the lowest priority value wins, and the priority only matters relative to
other renderers registered for the same kind (or for the ``"*"``
wildcard). Ties go to the earliest registration.

Thread Safety:
NodeRendererRegistry is immutable after creation. Safe to share.
Use NodeRendererRegistryBuilder for mutable construction.

Example:
    >>> builder = NodeRendererRegistryBuilder()
    >>> builder.register(BuiltinNodeRenderer(), priority=DEFAULT_PRIORITY)
    >>> builder.register(FencedCodeRenderer(highlighter), priority=500)
    >>> registry = builder.build()
    >>> registry.get("fence")
    <FencedCodeRenderer ...>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mamd.nodes import WILDCARD

if TYPE_CHECKING:
    from markdown_it.token import Token

    from mamd.renderers.html import RenderContext

DEFAULT_PRIORITY = 1000


class WalkStatus(Enum):
    """What the walker does after a node renderer returns."""

    CONTINUE = "continue"
    SKIP_CHILDREN = "skip_children"
    STOP = "stop"


@runtime_checkable
class NodeRenderer(Protocol):
    """Protocol for node renderers.

    A node renderer handles enter and leave events for the node kinds it
    declares. Container nodes get ``on_enter`` at their opening token and
    ``on_leave`` at their closing token; leaf nodes get both, back to back.

    Thread Safety:
        Renderers must be stateless. Per-render state lives on RenderContext.
    """

    @property
    def kinds(self) -> frozenset[str]:
        """Node kinds handled, or ``{"*"}`` for all of them."""
        ...

    def on_enter(self, ctx: RenderContext, node: Token) -> WalkStatus:
        """Called when the walk enters ``node``."""
        ...

    def on_leave(self, ctx: RenderContext, node: Token) -> WalkStatus:
        """Called when the walk leaves ``node``."""
        ...


@dataclass(frozen=True, slots=True)
class Registration:
    """A renderer with its priority and registration order."""

    renderer: NodeRenderer
    priority: int
    order: int

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.priority, self.order)


class NodeRendererRegistry:
    """Immutable registry of node renderers.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_by_kind", "_fallback", "_resolved")

    def __init__(
        self,
        by_kind: dict[str, tuple[Registration, ...]],
        fallback: tuple[Registration, ...],
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use NodeRendererRegistryBuilder to create instances.
        """
        self._by_kind = by_kind
        self._fallback = fallback
        self._resolved: dict[str, NodeRenderer | None] = {}

    def get(self, kind: str) -> NodeRenderer | None:
        """Get the winning renderer for a node kind.

        Args:
            kind: Node kind (e.g., "fence", "heading")

        Returns:
            Lowest-priority-value renderer for the kind or the wildcard,
            None if nothing is registered for either
        """
        try:
            return self._resolved[kind]
        except KeyError:
            pass
        candidates = self._by_kind.get(kind, ()) + self._fallback
        winner = min(candidates, key=lambda reg: reg.sort_key).renderer if candidates else None
        # Memoized lookup; the registrations themselves never change
        self._resolved[kind] = winner
        return winner

    def registrations(self, kind: str) -> tuple[Registration, ...]:
        """All registrations that apply to ``kind``, best first."""
        candidates = self._by_kind.get(kind, ()) + self._fallback
        return tuple(sorted(candidates, key=lambda reg: reg.sort_key))

    @property
    def kinds(self) -> frozenset[str]:
        """Node kinds with an explicit (non-wildcard) registration."""
        return frozenset(self._by_kind)

    def __contains__(self, kind: str) -> bool:
        return self.get(kind) is not None


class NodeRendererRegistryBuilder:
    """Mutable builder for NodeRendererRegistry.

    Example:
        >>> builder = NodeRendererRegistryBuilder()
        >>> builder.register(MyRenderer(), priority=500)
        >>> registry = builder.build()
    """

    __slots__ = ("_registrations",)

    def __init__(self) -> None:
        self._registrations: list[Registration] = []

    def register(
        self, renderer: NodeRenderer, priority: int = DEFAULT_PRIORITY
    ) -> NodeRendererRegistryBuilder:
        """Register a node renderer.

        Args:
            renderer: Renderer implementing the NodeRenderer protocol
            priority: Relative ordering key; lower wins

        Returns:
            Self for chaining

        Raises:
            TypeError: If renderer does not implement the protocol
            ValueError: If renderer declares no node kinds
        """
        for attr in ("kinds", "on_enter", "on_leave"):
            if not hasattr(renderer, attr):
                msg = f"Renderer {type(renderer).__name__} missing {attr!r} attribute"
                raise TypeError(msg)

        if not renderer.kinds:
            msg = f"Renderer {type(renderer).__name__} declares no node kinds"
            raise ValueError(msg)

        self._registrations.append(
            Registration(renderer=renderer, priority=priority, order=len(self._registrations))
        )
        return self

    def build(self) -> NodeRendererRegistry:
        """Build immutable registry from registered renderers."""
        by_kind: dict[str, list[Registration]] = {}
        fallback: list[Registration] = []
        for reg in self._registrations:
            for kind in reg.renderer.kinds:
                if kind == WILDCARD:
                    fallback.append(reg)
                else:
                    by_kind.setdefault(kind, []).append(reg)
        return NodeRendererRegistry(
            by_kind={kind: tuple(regs) for kind, regs in by_kind.items()},
            fallback=tuple(fallback),
        )

    def __len__(self) -> int:
        """Number of registered renderers."""
        return len(self._registrations)
