"""Page template loading and rendering.

The page template is a Jinja2 template loaded once per build. It receives
exactly three variables:

    content     pre-rendered HTML fragment (inserted unescaped)
    title       page title, plain text (escaped)
    css_offset  "../" per directory level, to reach the shared stylesheet

Example template:

    <link rel="stylesheet" href="{{ css_offset }}mamd.css" />
    <title>{{ title }}</title>
    <body>{{ content }}</body>

"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError
from jinja2 import select_autoescape
from markupsafe import Markup

from mamd.errors import ConversionError, TemplateLoadError


class PageTemplate:
    """A compiled page template.

    Instances are read-only after loading and can be reused for every page
    of a build.
    """

    __slots__ = ("_template", "_path")

    def __init__(self, template: Template, path: Path | None = None) -> None:
        self._template = template
        self._path = path

    @property
    def path(self) -> Path | None:
        return self._path

    @classmethod
    def from_string(cls, source: str) -> PageTemplate:
        """Compile a template from a string (HTML autoescaping on)."""
        env = _environment(loader=None)
        try:
            return cls(env.from_string(source))
        except TemplateError as exc:
            raise TemplateLoadError("<string>", str(exc)) from exc

    def render(self, *, content: str, title: str, css_offset: str) -> str:
        """Render one page.

        Raises:
            ConversionError: If the template fails while rendering
        """
        try:
            return self._template.render(
                content=Markup(content),
                title=title,
                css_offset=css_offset,
            )
        except TemplateError as exc:
            raise ConversionError(f"Template rendering failed: {exc}") from exc


def _environment(loader: FileSystemLoader | None) -> Environment:
    return Environment(
        loader=loader,
        autoescape=select_autoescape(default=True, default_for_string=True),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def load_template(path: str | Path) -> PageTemplate:
    """Load and compile the page template at ``path``.

    Raises:
        TemplateLoadError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise TemplateLoadError(str(path), "no such file")

    env = _environment(loader=FileSystemLoader(str(path.parent)))
    try:
        template = env.get_template(path.name)
    except (OSError, TemplateError) as exc:
        raise TemplateLoadError(str(path), str(exc)) from exc
    return PageTemplate(template, path)
