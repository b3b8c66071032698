"""Highlighting engine abstraction for jxr2prism.

This module provides the interface the converter uses to re-tokenize plain
source text, with a Pygments-based implementation. The engine emits markup
using Prism's token class names (``token keyword``, ``token string`` ...) so
converted pages work with Prism themes. Line boundaries are kept intact: a
token that spans several lines is closed and reopened at every newline, so
each line of output is a balanced fragment.
"""

from __future__ import annotations

import asyncio
import html
import logging
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass
class CodeElement:
    """An element holding source text to highlight, named by grammar.

    The engine fills in ``markup``; ``text`` is left as given.
    """

    language: str
    text: str
    markup: str | None = None

    @property
    def class_name(self) -> str:
        return f"language-{self.language}"


class HighlightEngine(Protocol):
    """Protocol for synchronous re-tokenizing engines."""

    name: str

    def is_available(self) -> bool:
        """Check if the engine is loaded and usable."""
        ...

    def highlight_element(self, element: CodeElement) -> None:
        """Highlight ``element.text`` into ``element.markup`` in place."""
        ...


class AsyncHighlightEngine(Protocol):
    """Protocol for engines whose highlighting call must be awaited."""

    name: str

    def is_available(self) -> bool: ...

    async def highlight_element(self, element: CodeElement) -> None: ...


def prism_class(ttype: Any, value: str) -> str | None:
    """Map a Pygments token type to a Prism token class (None for plain text)."""

    from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String

    if ttype in Comment:
        return "comment"
    if ttype in Keyword.Constant:
        return "boolean" if value in ("true", "false") else "keyword"
    if ttype in Keyword:
        return "keyword"
    if ttype in String.Char:
        return "char"
    if ttype in String:
        return "string"
    if ttype in Number:
        return "number"
    if ttype in Operator.Word:
        return "keyword"
    if ttype in Operator:
        return "operator"
    if ttype in Punctuation:
        return "punctuation"
    if ttype in Name.Decorator:
        return "annotation punctuation"
    if ttype in Name.Function:
        return "function"
    if ttype in Name.Class:
        return "class-name"
    if ttype in Name.Namespace:
        return "namespace"
    if ttype in Name.Builtin:
        return "builtin"
    if ttype in Name.Constant:
        return "constant"
    return None


def render_token(css: str | None, value: str) -> str:
    """Render one token, closing its span before each newline."""

    pieces = value.split("\n")
    out: list[str] = []
    for i, piece in enumerate(pieces):
        if i:
            out.append("\n")
        if not piece:
            continue
        escaped = html.escape(piece, quote=False)
        out.append(f'<span class="token {css}">{escaped}</span>' if css else escaped)
    return "".join(out)


class PygmentsHighlightEngine:
    """Pygments-based engine emitting Prism-compatible markup."""

    name = "pygments"

    def __init__(self, fallback_language: str = "text") -> None:
        self.fallback_language = fallback_language
        self._lexers: dict[str, Any] = {}
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Check if Pygments is importable."""
        if self._available is None:
            try:
                import importlib.util

                if importlib.util.find_spec("pygments") is None:
                    raise ImportError("pygments module not found")
                self._available = True
                logger.debug("Pygments highlighting engine available")
            except ImportError as e:
                logger.warning(f"Pygments not available for highlighting: {e}")
                self._available = False
        return self._available

    def has_lexer(self, language: str) -> bool:
        """Whether Pygments ships a grammar for ``language``."""
        from pygments.lexers import find_lexer_class_by_name
        from pygments.util import ClassNotFound

        try:
            find_lexer_class_by_name(language)
        except ClassNotFound:
            return False
        return True

    def _get_lexer(self, language: str) -> Any:
        """Get or create a lexer for the language, falling back to plain text."""
        if language not in self._lexers:
            from pygments.lexers import get_lexer_by_name
            from pygments.util import ClassNotFound

            # stripnl/ensurenl would change the line count
            opts = {"stripnl": False, "ensurenl": False, "stripall": False}
            try:
                lexer = get_lexer_by_name(language, **opts)
            except ClassNotFound:
                logger.warning(
                    "No lexer for language '%s'; using '%s'", language, self.fallback_language
                )
                lexer = get_lexer_by_name(self.fallback_language, **opts)
            self._lexers[language] = lexer
        return self._lexers[language]

    def highlight(self, text: str, language: str) -> str:
        lexer = self._get_lexer(language)
        return "".join(render_token(prism_class(t, v), v) for t, v in lexer.get_tokens(text))

    def highlight_element(self, element: CodeElement) -> None:
        element.markup = self.highlight(element.text, element.language)


class AsyncEngineAdapter:
    """Expose a synchronous engine through the awaitable interface.

    Highlighting runs in a worker thread so large files do not block the loop.
    """

    def __init__(self, engine: HighlightEngine) -> None:
        self.engine = engine
        self.name = engine.name

    def is_available(self) -> bool:
        return self.engine.is_available()

    async def highlight_element(self, element: CodeElement) -> None:
        await asyncio.to_thread(self.engine.highlight_element, element)


__all__ = [
    "AsyncEngineAdapter",
    "AsyncHighlightEngine",
    "CodeElement",
    "HighlightEngine",
    "PygmentsHighlightEngine",
    "prism_class",
    "render_token",
]
