"""Error hierarchy and message formatting tests."""

import pytest

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


class TestConversionErrorFormatting:
    """Verify location prefixes on ConversionError."""

    def test_message_only(self) -> None:
        err = ConversionError("bad input")
        assert str(err) == "bad input"
        assert err.lineno is None
        assert err.source_file is None

    def test_with_line_number(self) -> None:
        err = ConversionError("bad fence", lineno=7)
        assert str(err) == "7 bad fence"

    def test_with_source_file(self) -> None:
        err = ConversionError("oops", source_file="docs/a.md")
        assert str(err) == "docs/a.md oops"

    def test_with_file_and_line(self) -> None:
        err = HighlightError("lexer failed", lineno=3, source_file="a.md")
        assert str(err) == "a.md:3 lexer failed"
        assert err.message == "lexer failed"


class TestHierarchy:
    """Every mamd error is a MamdError."""

    @pytest.mark.parametrize(
        ("error", "parent"),
        [
            (RenderError("x"), ConversionError),
            (HighlightError("x"), RenderError),
            (PluginError("p", "x"), MamdError),
            (TemplateLoadError("t.html", "x"), MamdError),
            (StylesheetError("s.css", "x"), MamdError),
            (BuildError("x"), MamdError),
            (TraversalError("dir", "x"), BuildError),
        ],
    )
    def test_parent(self, error: Exception, parent: type) -> None:
        assert isinstance(error, parent)
        assert isinstance(error, MamdError)


class TestResourceErrors:
    """Resource errors name the path they failed on."""

    def test_plugin_error(self) -> None:
        err = PluginError("nope", "unknown plugin")
        assert err.plugin_name == "nope"
        assert str(err) == "Plugin 'nope': unknown plugin"

    def test_template_load_error(self) -> None:
        err = TemplateLoadError("page.html", "no such file")
        assert err.path == "page.html"
        assert str(err) == "Template load error (page.html): no such file"

    def test_stylesheet_error(self) -> None:
        err = StylesheetError("mamd.css", "Permission denied")
        assert "mamd.css" in str(err)
        assert "Permission denied" in str(err)

    def test_traversal_error(self) -> None:
        err = TraversalError("docs", "Permission denied")
        assert str(err) == "File walk error (docs): Permission denied"
