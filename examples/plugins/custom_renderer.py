"""Override rendering for one node kind with a custom node renderer."""

from mamd import HtmlRenderer, NodeRendererRegistryBuilder, WalkStatus
from mamd.parser import create_parser, parse
from mamd.plugins import resolve_plugins
from mamd.renderers import DEFAULT_PRIORITY, BuiltinNodeRenderer


class CalloutQuotes:
    """Render block quotes as <aside class="callout">."""

    kinds = frozenset({"blockquote"})

    def on_enter(self, ctx, node):
        ctx.out.append('<aside class="callout">\n')
        return WalkStatus.CONTINUE

    def on_leave(self, ctx, node):
        ctx.out.append("</aside>\n")
        return WalkStatus.CONTINUE


md = create_parser(resolve_plugins(["task_lists"]))
builder = NodeRendererRegistryBuilder()
builder.register(BuiltinNodeRenderer(), priority=DEFAULT_PRIORITY)
builder.register(CalloutQuotes(), priority=500)
renderer = HtmlRenderer(md, builder.build())

doc = parse(md, "> **Note:** quotes become callouts.\n\n- [x] done\n")
print(renderer.render(doc))
