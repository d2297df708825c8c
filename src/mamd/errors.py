"""Exception classes for mamd.

Provides standardized exceptions for error handling throughout mamd.

Hierarchy:
    MamdError
    ├── ConversionError
    │   └── RenderError
    │       └── HighlightError
    ├── PluginError
    ├── TemplateLoadError
    ├── StylesheetError
    └── BuildError
        └── TraversalError
"""

from __future__ import annotations


class MamdError(Exception):
    """Base exception for all mamd errors.

    Subclass this for specific error categories.
    """

    pass


class ConversionError(MamdError):
    """Error while converting one Markdown document to HTML.

    Raised when the source cannot be decoded or a render step fails.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize conversion error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class RenderError(ConversionError):
    """Error during HTML rendering.

    Raised when a registered node renderer fails. Parsing itself never
    raises, so this is the only way a decoded document can fail to convert.
    """

    pass


class HighlightError(RenderError):
    """Error while tokenizing or formatting a single code block."""

    pass


class PluginError(MamdError):
    """Error in plugin lookup or initialization."""

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the failing plugin
            message: Description of the error
        """
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")


class TemplateLoadError(MamdError):
    """The page template could not be read or compiled."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Template load error ({path}): {message}")


class StylesheetError(MamdError):
    """The stylesheet asset could not be copied to the output root."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Could not copy stylesheet ({path}): {message}")


class BuildError(MamdError):
    """A build was aborted.

    Raised for per-file failures when the build runs with ``fail_fast``.
    """

    pass


class TraversalError(BuildError):
    """Walking the input tree failed (permission denied, vanished directory)."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"File walk error ({path}): {message}")
