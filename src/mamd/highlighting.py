"""Syntax highlighting for fenced code blocks.

Turns a code block into HTML with Pygments. Styles are baked into inline
``style`` attributes, so highlighted pages need no extra stylesheet.

Lexer resolution:
    1. A declared language is looked up by Pygments name or alias.
    2. Unknown or missing languages fall back to content inference: a table
       of line signatures for common languages, then Pygments' own
       ``guess_lexer`` when it is confident enough.
    3. Inconclusive inference uses the plain-text lexer, which emits the
       whole block as a single unstyled token.

Tokenization is total: every character of the code ends up in exactly one
token, in order. Text a lexer leaves unconsumed is emitted as one
``Token.Error`` token.

Usage:
    >>> from mamd.highlighting import PygmentsHighlighter
    >>> highlighter = PygmentsHighlighter(style="friendly")
    >>> html = highlighter.highlight("func f(){}\\n", "go")

    # Any callable taking (code, language) also works where a Highlighter
    # is expected:
    >>> def plain(code: str, language: str) -> str:
    ...     return f"<pre>{code}</pre>"
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Protocol

import pygments
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.token import Token, _TokenType
from pygments.util import ClassNotFound

from mamd.errors import HighlightError
from mamd.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_STYLE = "friendly"
FALLBACK_STYLE = "default"

# Content inference only looks at the head of a block
SAMPLE_LINES = 64
SAMPLE_CHARS = 4096

SIGNATURE_THRESHOLD = 0.5
GUESS_THRESHOLD = 0.3

# Keep text byte-for-byte: no newline stripping or appending
LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


class Highlighter(Protocol):
    """Protocol for syntax highlighters.

    Highlighters take code and a language tag and return HTML markup.
    """

    def highlight(self, code: str, language: str = "") -> str:
        """Highlight code with syntax colors.

        Args:
            code: Source code to highlight
            language: Language tag from the fence info string ("" if none)

        Returns:
            HTML markup with highlighting

        Contract:
            - MUST escape HTML entities in code
            - MUST fall back to plain text for unknown languages
            - MAY raise HighlightError when tokenizing or formatting fails
        """
        ...

    def supports_language(self, language: str) -> bool:
        """Check if highlighter knows the given language name or alias.

        Contract:
            - MUST NOT raise exceptions
        """
        ...


# Support for simple callable-based highlighters
SimpleHighlighter = Callable[[str, str], str]


@dataclass(frozen=True, slots=True)
class LanguageSignature:
    """Weighted line patterns that identify a language."""

    language: str
    patterns: tuple[tuple[re.Pattern[str], float], ...]

    def score(self, sample: str) -> float:
        total = sum(weight for pattern, weight in self.patterns if pattern.search(sample))
        return min(total, 1.0)


def _sig(language: str, *patterns: tuple[str, float], flags: int = 0) -> LanguageSignature:
    compiled = tuple((re.compile(p, re.MULTILINE | flags), w) for p, w in patterns)
    return LanguageSignature(language, compiled)


SIGNATURES: tuple[LanguageSignature, ...] = (
    _sig(
        "python",
        (r"^\s*def \w+\s*\(.*\)\s*(->.*)?:\s*$", 0.6),
        (r"^\s*class \w+(\([^)]*\))?:\s*$", 0.6),
        (r"^\s*from [\w.]+ import \S", 0.6),
        (r"^\s*import [\w.]+(\s+as\s+\w+)?\s*$", 0.3),
        (r"^\s*(elif|except|finally|with)\b.*:\s*$", 0.3),
        (r"\bself\.\w+", 0.2),
        (r"^\s*print\(", 0.2),
    ),
    _sig(
        "go",
        (r"^package \w+\s*$", 0.6),
        (r"^\s*func\s+(\([^)]*\)\s*)?\w+\s*\(", 0.6),
        (r"\w+\s*:=\s*", 0.2),
        (r'^\s*import\s+(\(|")', 0.3),
    ),
    _sig(
        "javascript",
        (r"^\s*import\s.+\sfrom\s+['\"]", 0.6),
        (r"^\s*export\s+(default\s+)?(function|const|class)\b", 0.5),
        (r"^\s*function\s*\w*\s*\(", 0.5),
        (r"^\s*(const|let|var)\s+\w+\s*=", 0.3),
        (r"console\.\w+\(", 0.4),
        (r"=>", 0.2),
    ),
    _sig(
        "bash",
        (r"\A#!\s*/\S*\b(env\s+)?(ba|z|k)?sh\b", 1.0),
        (r"^\s*(sudo|apt-get|apt|brew|pip|npm|yarn|export|echo|mkdir|curl|git)\s", 0.3),
        (r"^\s*(if|while)\s+\[", 0.4),
        (r"^\s*(fi|done|esac)\s*$", 0.3),
    ),
    _sig(
        "c",
        (r'^\s*#include\s*[<"]', 0.7),
        (r"\bint\s+main\s*\(", 0.5),
        (r"^\s*(static\s+)?(void|int|char|float|double)\s+\*?\w+\s*\(", 0.3),
        (r"\bprintf\s*\(", 0.2),
    ),
    _sig(
        "json",
        (r"\A\s*[\[{]\s*$", 0.3),
        (r'^\s*"[^"\n]+"\s*:', 0.3),
    ),
    _sig(
        "html",
        (r"\A\s*<!DOCTYPE\s+html", 1.0),
        (r"<(html|head|body|div|span|p|a|ul|li|table)\b[^>]*>", 0.3),
        (r"</\w+>", 0.2),
        flags=re.IGNORECASE,
    ),
    _sig(
        "sql",
        (r"^\s*SELECT\b[\s\S]*?\bFROM\b", 0.6),
        (r"^\s*(INSERT\s+INTO|CREATE\s+TABLE|UPDATE\s+\w+\s+SET|DELETE\s+FROM)\b", 0.6),
        flags=re.IGNORECASE,
    ),
)


def _sample(code: str) -> str:
    head = code[:SAMPLE_CHARS]
    return "\n".join(head.split("\n")[:SAMPLE_LINES])


def guess_language(code: str) -> str | None:
    """Guess a Pygments language name from the head of ``code``.

    Returns:
        Language name whose signature scores at least SIGNATURE_THRESHOLD,
        None if no signature is conclusive

    Example:
        >>> guess_language("def f():\\n    return 1\\n")
        'python'
    """
    sample = _sample(code)
    best: tuple[float, str | None] = (0.0, None)
    for signature in SIGNATURES:
        score = signature.score(sample)
        if score > best[0]:
            best = (score, signature.language)
    if best[0] >= SIGNATURE_THRESHOLD:
        return best[1]
    return None


def infer_lexer(code: str) -> Lexer | None:
    """Content-based lexer inference; None when inconclusive."""
    language = guess_language(code)
    if language is not None:
        return get_lexer_by_name(language, **LEXER_OPTIONS)

    sample = _sample(code)
    if not sample.strip():
        return None
    try:
        lexer = guess_lexer(sample, **LEXER_OPTIONS)
    except ClassNotFound:
        return None
    if isinstance(lexer, TextLexer) or lexer.analyse_text(sample) < GUESS_THRESHOLD:
        return None
    return lexer


def resolve_lexer(language: str, code: str) -> Lexer:
    """Pick the lexer for a code block.

    Args:
        language: Declared language tag ("" if none)
        code: Code text, used for inference

    Returns:
        Named lexer, inferred lexer, or the plain-text lexer
    """
    if language:
        try:
            return get_lexer_by_name(language, **LEXER_OPTIONS)
        except ClassNotFound:
            logger.debug("Unknown language %r, inferring from content", language)

    lexer = infer_lexer(code)
    if lexer is None:
        return TextLexer(**LEXER_OPTIONS)
    logger.debug("Inferred lexer %s", lexer.name)
    return lexer


def tokenize(lexer: Lexer, code: str) -> Iterator[tuple[_TokenType, str]]:
    """Lazily tokenize ``code``, covering every character exactly once.

    Token values are checked against the code. Once a lexer's output stops
    matching (Pygments drops a leading BOM, for instance), the rest of the
    code is emitted as a single ``Token.Error`` token.

    Raises:
        HighlightError: If the lexer itself raises
    """
    if code.startswith("\ufeff"):
        yield Token.Text, "\ufeff"
        yield from tokenize(lexer, code[1:])
        return

    consumed = 0
    try:
        for token_type, value in lexer.get_tokens(code):
            if not value:
                continue
            if code[consumed : consumed + len(value)] != value:
                break
            consumed += len(value)
            yield token_type, value
    except Exception as exc:
        raise HighlightError(f"Lexer {lexer.name!r} failed: {exc}") from exc

    if consumed < len(code):
        yield Token.Error, code[consumed:]


def resolve_style(name: str) -> type:
    """Look up a Pygments style by name, falling back to FALLBACK_STYLE."""
    try:
        return get_style_by_name(name)
    except ClassNotFound:
        logger.warning("Unknown highlight style %r, using %r", name, FALLBACK_STYLE)
        return get_style_by_name(FALLBACK_STYLE)


class PygmentsHighlighter:
    """Pygments-backed highlighter implementing the Highlighter protocol.

    The style table is chosen once per instance. Output groups tokens one
    source line at a time inside ``<div class="highlight"><pre>``.
    """

    __slots__ = ("_style", "_formatter")

    def __init__(self, style: str = DEFAULT_STYLE) -> None:
        self._style = resolve_style(style)
        self._formatter = HtmlFormatter(style=self._style, noclasses=True)

    @property
    def style(self) -> type:
        return self._style

    def highlight(self, code: str, language: str = "") -> str:
        """Highlight code using Pygments.

        Raises:
            HighlightError: If tokenizing or formatting fails
        """
        code = code.replace("\r\n", "\n").replace("\r", "\n")
        lexer = resolve_lexer(language, code)
        try:
            return pygments.format(tokenize(lexer, code), self._formatter)
        except HighlightError:
            raise
        except Exception as exc:
            raise HighlightError(f"Formatting failed for {lexer.name!r}: {exc}") from exc

    def supports_language(self, language: str) -> bool:
        """Check if Pygments has a lexer for the language name or alias."""
        if not language:
            return False
        try:
            get_lexer_by_name(language)
        except ClassNotFound:
            return False
        return True


def highlight(code: str, language: str = "", *, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``code`` with a one-off PygmentsHighlighter."""
    return PygmentsHighlighter(style=style).highlight(code, language)
