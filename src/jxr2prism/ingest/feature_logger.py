"""Centralized conversion decision logging for jxr2prism.

These helpers record what the converter is configured to do, whether the
highlighting engine can serve the requested grammar, and every point where a
document was converted in a reduced form. They are meant for troubleshooting
a site run with ``-v`` rather than for user progress updates, which go
through ProgressReporter.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jxr2prism.model.options import ConverterOptions

logger = logging.getLogger(__name__)


def log_converter_configuration(options: ConverterOptions) -> None:
    """Log the converter configuration decisions for debugging.

    Args:
        options: Converter options to log
    """
    logger.info("Converter configuration:")
    logger.info("  Language: %s", options.language)
    logger.info("  Block selector: %s", options.block_selector)
    logger.info("  Anchor selector: %s", options.anchor_selector)
    logger.info("  Anchor mode: %s", options.anchor_mode.value)


def log_engine_availability(engine: Any, language: str) -> bool:
    """Log whether the engine is loaded and has a grammar for ``language``.

    Engines that expose ``has_lexer`` are asked about the grammar; an engine
    without a grammar still converts, as plain text. Returns the engine's
    availability.
    """
    name = getattr(engine, "name", type(engine).__name__)
    if not engine.is_available():
        logger.warning("Highlighting engine '%s': unavailable, JXR highlighting is kept", name)
        return False

    has_lexer = getattr(engine, "has_lexer", None)
    if callable(has_lexer) and not has_lexer(language):
        logger.warning(
            "Highlighting engine '%s': no grammar for '%s', sources render as plain text",
            name,
            language,
        )
    else:
        logger.info("Highlighting engine '%s': available for '%s'", name, language)
    return True


def _describe(source: Path | str | None) -> str:
    return str(source) if source is not None else "<document>"


def log_conversion_decision(
    source: Path | str | None,
    key: str,
    value: str,
    context: dict[str, Any] | None = None,
) -> None:
    """Log a per-document conversion decision, e.g. ``anchor_mode=sequential``."""
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        logger.info("%s: %s=%s (%s)", _describe(source), key, value, context_str)
    else:
        logger.info("%s: %s=%s", _describe(source), key, value)


def log_degraded_conversion(
    source: Path | str | None,
    feature: str,
    error_type: str,
    action: str,
    details: str | None = None,
) -> None:
    """Log a document converted in reduced form (e.g. without line numbers).

    Args:
        source: Page being converted
        feature: Part of the output affected (e.g. "Line numbers")
        error_type: What went wrong (e.g. "line_count_mismatch")
        action: What was done instead (e.g. "render_unnumbered")
        details: Optional additional details
    """
    suffix = f" ({details})" if details else ""
    logger.warning(
        "%s: %s degraded by %s -> %s%s", _describe(source), feature, error_type, action, suffix
    )


__all__ = [
    "log_converter_configuration",
    "log_conversion_decision",
    "log_degraded_conversion",
    "log_engine_availability",
]
