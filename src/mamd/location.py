"""Source spans for zero-copy extraction of code block text.

A SourceSpan is a half-open character range into a Document's normalized
source. Fenced code blocks record one span per code line, so the original
code text can be recovered exactly without storing a copy.

Thread Safety:
SourceSpan is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open ``[start, stop)`` range of characters in a source buffer.

    Examples:
        >>> span = SourceSpan(4, 8)
        >>> span.text("def f():")
        'f():'
    """

    start: int
    stop: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.stop < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.stop})")

    def __len__(self) -> int:
        return self.stop - self.start

    def text(self, source: str) -> str:
        """Slice this span out of ``source``."""
        return source[self.start : self.stop]


def join_spans(source: str, spans: Iterable[SourceSpan]) -> str:
    """Concatenate the text of ``spans`` in order."""
    return "".join(source[span.start : span.stop] for span in spans)
