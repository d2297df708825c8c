"""Tests for BuildConfig."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from mamd.config import DEFAULT_STYLESHEET, DEFAULT_TEMPLATE, BuildConfig
from mamd.highlighting import DEFAULT_STYLE


class TestBuildConfig:
    """Construction and defaults."""

    def test_defaults(self) -> None:
        config = BuildConfig(input_root=Path("docs"))
        assert config.output_root == Path(".")
        assert config.template_path == DEFAULT_TEMPLATE
        assert config.stylesheet_path == DEFAULT_STYLESHEET
        assert config.style == DEFAULT_STYLE
        assert config.suffixes == (".md",)
        assert config.fail_fast is False

    def test_bundled_resources_exist(self) -> None:
        assert DEFAULT_TEMPLATE.is_file()
        assert DEFAULT_STYLESHEET.is_file()

    def test_strings_become_paths(self) -> None:
        config = BuildConfig(input_root="docs", output_root="site")  # type: ignore[arg-type]
        assert config.input_root == Path("docs")
        assert config.output_root == Path("site")

    def test_single_suffix_string(self) -> None:
        config = BuildConfig(input_root=Path("d"), suffixes=".markdown")  # type: ignore[arg-type]
        assert config.suffixes == (".markdown",)

    def test_empty_suffixes_rejected(self) -> None:
        with pytest.raises(ValueError, match="suffix"):
            BuildConfig(input_root=Path("d"), suffixes=())

    def test_stylesheet_target(self) -> None:
        config = BuildConfig(input_root=Path("d"), output_root=Path("site"))
        assert config.stylesheet_target == Path("site/mamd.css")

    def test_frozen(self) -> None:
        config = BuildConfig(input_root=Path("d"))
        with pytest.raises(FrozenInstanceError):
            config.style = "monokai"  # type: ignore[misc]


class TestBuildConfigFromDict:
    """BuildConfig.from_dict() factory."""

    def test_basic(self) -> None:
        config = BuildConfig.from_dict({"input_root": "docs", "style": "monokai"})
        assert config.input_root == Path("docs")
        assert config.style == "monokai"
        assert config.output_root == Path(".")

    def test_unknown_keys_ignored(self) -> None:
        config = BuildConfig.from_dict({"input_root": "d", "unknown_key": 1})
        assert not hasattr(config, "unknown_key")

    def test_input_root_required(self) -> None:
        with pytest.raises(ValueError, match="input_root"):
            BuildConfig.from_dict({"output_root": "site"})


class TestWithOverrides:
    def test_none_values_dropped(self) -> None:
        config = BuildConfig(input_root=Path("d"), style="monokai")
        changed = config.with_overrides(style=None, fail_fast=True)
        assert changed.style == "monokai"
        assert changed.fail_fast is True
        assert config.fail_fast is False

    def test_paths_coerced(self) -> None:
        changed = BuildConfig(input_root=Path("d")).with_overrides(output_root="out")
        assert changed.output_root == Path("out")
