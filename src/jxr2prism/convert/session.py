"""Per-document session state and "document ready" scheduling.

A session lives for exactly one document: it is created when the file is
opened, becomes ready once the file is parsed, and is discarded after the
result is written. Work registered with :meth:`DocumentSession.when_ready`
waits for readiness; work registered after that point runs immediately, since
the ready signal will not fire again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from jxr2prism.convert.converter import SourceRenderConverter
from jxr2prism.ingest.html_document import DocumentTree, SoupDocument
from jxr2prism.model.document import ConversionResult

logger = logging.getLogger(__name__)

ReadyCallback = Callable[["DocumentSession"], None]


class ReadyState(Enum):
    LOADING = "loading"
    COMPLETE = "complete"


@dataclass
class DocumentSession:
    """State for one document, from load until it is written back."""

    document: DocumentTree | None = None
    path: Path | None = None
    ready_state: ReadyState = ReadyState.LOADING
    injected_stylesheet: str | None = None
    injected_script: bool = False
    results: list[ConversionResult] = field(default_factory=list)
    _pending: list[ReadyCallback] = field(default_factory=list, repr=False)

    @property
    def is_ready(self) -> bool:
        return self.ready_state is ReadyState.COMPLETE

    def when_ready(self, callback: ReadyCallback) -> None:
        if self.is_ready:
            callback(self)
        else:
            self._pending.append(callback)

    def mark_ready(self) -> None:
        """Switch to COMPLETE and run queued callbacks once, in registration order."""
        if self.is_ready:
            return
        self.ready_state = ReadyState.COMPLETE
        pending, self._pending = self._pending, []
        logger.debug("Session ready (%s); running %d callbacks", self.path, len(pending))
        for callback in pending:
            callback(self)

    def load(self, document: DocumentTree) -> None:
        self.document = document
        self.mark_ready()

    def discard(self) -> None:
        self.document = None
        self._pending.clear()


def open_session(path: Path, encoding: str = "utf-8") -> DocumentSession:
    """Parse an HTML file into a ready session."""
    session = DocumentSession(path=path)
    session.load(SoupDocument.from_path(path, encoding=encoding))
    return session


def schedule_conversion(session: DocumentSession, converter: SourceRenderConverter) -> None:
    """Run the converter on the session's document once it is ready."""

    def _run(s: DocumentSession) -> None:
        if s.document is None:
            logger.warning("Session for %s has no document; skipping conversion", s.path)
            return
        s.results.append(converter.convert(s.document))

    session.when_ready(_run)


__all__ = [
    "DocumentSession",
    "ReadyState",
    "open_session",
    "schedule_conversion",
]
