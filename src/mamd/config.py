"""Build configuration for mamd.

A BuildConfig is constructed once at startup (by the CLI or by calling code)
and passed explicitly to the build driver. Nothing reads configuration from
module globals.

Usage:
    config = BuildConfig(input_root=Path("docs"), output_root=Path("site"))
    report = build_site(config)

    # Or from a mapping, e.g. a parsed config file
    config = BuildConfig.from_dict({"input_root": "docs", "style": "monokai"})

"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from mamd.highlighting import DEFAULT_STYLE

RESOURCES_DIR = Path(__file__).parent / "resources"
DEFAULT_TEMPLATE = RESOURCES_DIR / "template.html"
DEFAULT_STYLESHEET = RESOURCES_DIR / "mamd.css"

# Name the stylesheet always has in the output root; templates link to it
STYLESHEET_NAME = "mamd.css"
MARKDOWN_SUFFIXES = (".md",)

_PATH_FIELDS = frozenset({"input_root", "output_root", "template_path", "stylesheet_path"})


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Immutable build configuration.

    Attributes:
        input_root: Root of the tree scanned for Markdown files
        output_root: Root of the mirrored HTML output tree
        template_path: Jinja2 page template
        stylesheet_path: Stylesheet copied to the output root
        style: Pygments style name for code highlighting
        suffixes: File suffixes treated as Markdown (case-sensitive)
        fail_fast: Abort the whole build on the first per-file error

    """

    input_root: Path
    output_root: Path = Path(".")
    template_path: Path = DEFAULT_TEMPLATE
    stylesheet_path: Path = DEFAULT_STYLESHEET
    style: str = DEFAULT_STYLE
    suffixes: tuple[str, ...] = MARKDOWN_SUFFIXES
    fail_fast: bool = False

    def __post_init__(self) -> None:
        for name in _PATH_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Path):
                object.__setattr__(self, name, Path(value))
        if isinstance(self.suffixes, str):
            object.__setattr__(self, "suffixes", (self.suffixes,))
        else:
            object.__setattr__(self, "suffixes", tuple(self.suffixes))
        if not self.suffixes:
            raise ValueError("At least one Markdown suffix is required")

    @property
    def stylesheet_target(self) -> Path:
        """Where the stylesheet lands in the output tree."""
        return self.output_root / STYLESHEET_NAME

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> BuildConfig:
        """Create BuildConfig from a dictionary.

        Only keys that are BuildConfig fields are used; unknown keys
        are silently ignored. Paths may be given as strings.

        Raises:
            ValueError: If ``input_root`` is missing

        Example:
            >>> config = BuildConfig.from_dict({
            ...     "input_root": "docs",
            ...     "fail_fast": True,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.input_root
            PosixPath('docs')
        """
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "input_root" not in filtered:
            raise ValueError("input_root is required")
        return cls(**filtered)

    def with_overrides(self, **changes: Any) -> BuildConfig:
        """Copy of this config with ``None``-valued overrides dropped."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
