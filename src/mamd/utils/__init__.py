"""Utility modules for mamd.

Provides:
- text: slugify, unique_slug for heading anchors
- logger: get_logger, configure_logging
- stringbuilder: StringBuilder output buffer
"""

from mamd.utils.logger import configure_logging, get_logger
from mamd.utils.stringbuilder import StringBuilder
from mamd.utils.text import slugify, unique_slug

__all__ = [
    "StringBuilder",
    "configure_logging",
    "get_logger",
    "slugify",
    "unique_slug",
]
