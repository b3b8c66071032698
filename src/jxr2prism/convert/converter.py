"""Re-render pre-highlighted JXR source blocks with a second highlighting engine.

JXR cross-reference pages contain one ``<pre>`` whose lines start with
``<a class="jxr_linenumber">`` anchors and carry JXR's own coloring spans. The
converter pulls the plain source back out of that block, re-highlights it with
the configured engine and replaces the block with a two-column structure: a
line-number column and the highlighted code.

Conversion is an enhancement, never a requirement for a usable page. Every
failure path leaves the document as it was, logs through ErrorManager and
returns a ConversionResult; nothing is raised to the caller.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any

from jxr2prism.convert.render import render_converted_block
from jxr2prism.highlight.engine import (
    AsyncEngineAdapter,
    AsyncHighlightEngine,
    CodeElement,
    HighlightEngine,
)
from jxr2prism.ingest.error_handling import (
    ErrorContext,
    ErrorManager,
    LineCountMismatchError,
    MissingDependencyError,
    MissingTargetError,
)
from jxr2prism.ingest.html_document import DocumentTree
from jxr2prism.model.document import (
    ConversionResult,
    ConversionStatus,
    ConvertedBlock,
    ExtractedSource,
    HighlightedOutput,
    LineAnchor,
    LineIndex,
)
from jxr2prism.model.options import AnchorMode, ConverterOptions

logger = logging.getLogger(__name__)


class _Prepared:
    __slots__ = ("anchors", "block", "manager", "source")

    def __init__(
        self,
        block: Any,
        source: ExtractedSource,
        anchors: list[LineAnchor],
        manager: ErrorManager,
    ) -> None:
        self.block = block
        self.source = source
        self.anchors = anchors
        self.manager = manager


class SourceRenderConverter:
    """Convert the JXR source block of a document to engine-highlighted markup."""

    def __init__(
        self,
        engine: HighlightEngine | AsyncHighlightEngine | None,
        options: ConverterOptions | None = None,
        error_manager: ErrorManager | None = None,
    ) -> None:
        self.engine = engine
        self.options = options or ConverterOptions()
        self._error_manager = error_manager

    def _manager_for(self, document: DocumentTree) -> ErrorManager:
        if self._error_manager is not None:
            return self._error_manager
        source = getattr(document, "source", None)
        return ErrorManager(
            ErrorContext(
                source_path=Path(source) if source is not None else None,
                source_module="converter",
                selector=self.options.block_selector,
            )
        )

    def convert(self, document: DocumentTree) -> ConversionResult:
        """Convert the document's source block in place.

        The engine must be synchronous; use :meth:`convert_async` for engines
        whose ``highlight_element`` is a coroutine.
        """

        manager = self._manager_for(document)
        try:
            prepared = self._prepare(document, manager)
            if isinstance(prepared, ConversionResult):
                return prepared
            element = CodeElement(language=self.options.language, text=prepared.source.text)
            result = self.engine.highlight_element(element)  # type: ignore[union-attr]
            if inspect.isawaitable(result):
                # Close the coroutine so it is not reported as never awaited
                close = getattr(result, "close", None)
                if callable(close):
                    close()
                raise TypeError(
                    f"Engine '{self._engine_name()}' is asynchronous; use convert_async()"
                )
            return self._finish(document, prepared, element)
        except Exception as exc:
            return self._failed(manager, exc)

    async def convert_async(self, document: DocumentTree) -> ConversionResult:
        """Convert the document, awaiting the engine before re-segmenting."""

        manager = self._manager_for(document)
        try:
            prepared = self._prepare(document, manager)
            if isinstance(prepared, ConversionResult):
                return prepared
            engine = self.engine
            if not inspect.iscoroutinefunction(engine.highlight_element):  # type: ignore[union-attr]
                engine = AsyncEngineAdapter(engine)  # type: ignore[arg-type]
            element = CodeElement(language=self.options.language, text=prepared.source.text)
            await engine.highlight_element(element)  # type: ignore[union-attr]
            return self._finish(document, prepared, element)
        except Exception as exc:
            return self._failed(manager, exc)

    def _engine_name(self) -> str:
        return str(getattr(self.engine, "name", type(self.engine).__name__))

    def _prepare(
        self, document: DocumentTree, manager: ErrorManager
    ) -> _Prepared | ConversionResult:
        opts = self.options

        if self.engine is None or not self.engine.is_available():
            err = MissingDependencyError(self._engine_name() if self.engine else "none")
            manager.warn(
                "JXR-001", "Highlighting engine not loaded, keeping JXR highlighting", exception=err
            )
            return ConversionResult(ConversionStatus.MISSING_DEPENDENCY, message=str(err))

        block = document.find_block(opts.block_selector)
        if block is None:
            err = MissingTargetError(opts.block_selector, document.source)
            manager.warn("JXR-002", "No source block found", exception=err)
            return ConversionResult(ConversionStatus.MISSING_TARGET, message=str(err))

        if document.is_processed(block, opts.processed_attribute):
            logger.debug("Source block already converted; skipping")
            return ConversionResult(ConversionStatus.ALREADY_PROCESSED)

        source = ExtractedSource.from_raw(document.extract_text(block, opts.anchor_selector))
        anchors = document.collect_anchors(block, opts.anchor_selector)
        if anchors and len(anchors) != source.line_count:
            manager.warn(
                "JXR-005",
                "Line anchor count differs from extracted line count",
                extra={"anchor_count": len(anchors), "source_lines": source.line_count},
            )
        return _Prepared(block, source, anchors, manager)

    def _finish(
        self, document: DocumentTree, prepared: _Prepared, element: CodeElement
    ) -> ConversionResult:
        manager = prepared.manager
        if element.markup is None:
            raise RuntimeError(f"Engine '{self._engine_name()}' produced no markup")

        lines = HighlightedOutput(element.markup).lines()
        expected = prepared.source.line_count
        status = ConversionStatus.CONVERTED
        if len(lines) != expected:
            mismatch = LineCountMismatchError(expected, len(lines))
            manager.warn(
                "JXR-003",
                "Line count changed during highlighting; rendering without line numbers",
                extra={"source_lines": expected, "rendered_lines": len(lines)},
                exception=mismatch,
            )
            manager.error_policy("Line numbers", "line_count_mismatch", "render_unnumbered")
            index = LineIndex()
            status = ConversionStatus.CONVERTED_WITHOUT_NUMBERS
        else:
            index = self._build_index(len(lines), prepared.anchors, manager)

        converted = ConvertedBlock(
            line_index=index, code_lines=tuple(lines), language=self.options.language
        )
        document.replace(prepared.block, render_converted_block(converted, self.options))

        manager.info(
            "JXR-010",
            "JXR source converted to Prism highlighting",
            extra={"rendered_lines": len(lines), "numbered": converted.numbered},
        )
        return ConversionResult(
            status,
            line_count=len(lines),
            anchor_count=len(prepared.anchors),
            identifiers=index.identifiers,
        )

    def _build_index(
        self, count: int, anchors: list[LineAnchor], manager: ErrorManager
    ) -> LineIndex:
        if self.options.anchor_mode is AnchorMode.PRESERVE:
            if len(anchors) == count:
                try:
                    return LineIndex.from_anchors(anchors)
                except ValueError as exc:
                    manager.decision(
                        "JXR-020", "anchor_mode", "sequential", extra={"reason": str(exc)}
                    )
            else:
                manager.decision(
                    "JXR-020",
                    "anchor_mode",
                    "sequential",
                    extra={"reason": f"{len(anchors)} anchors for {count} lines"},
                )
        return LineIndex.sequential(count)

    def _failed(self, manager: ErrorManager, exc: Exception) -> ConversionResult:
        manager.error("JXR-004", "Conversion failed, keeping original block", exception=exc)
        return ConversionResult(ConversionStatus.FAILED, message=str(exc))


__all__ = ["SourceRenderConverter"]
