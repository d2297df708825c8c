"""Shared fixtures for mamd tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from mamd.config import BuildConfig


def _write(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write_file() -> Callable[[Path, str | bytes], Path]:
    """Create a file (and its parents) with text or bytes content."""
    return _write


@pytest.fixture
def site(tmp_path: Path) -> tuple[Path, Path]:
    """Empty input root and not-yet-created output root."""
    input_root = tmp_path / "input"
    output_root = tmp_path / "output"
    input_root.mkdir()
    return input_root, output_root


@pytest.fixture
def config(site: tuple[Path, Path]) -> BuildConfig:
    input_root, output_root = site
    return BuildConfig(input_root=input_root, output_root=output_root)
