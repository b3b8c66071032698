"""Error taxonomy and structured error logging for jxr2prism.

Conversion is a best-effort enhancement: every failure is handled where it is
detected and reported through :class:`ErrorManager`, which attaches stable
event codes and context fields to the log records. The exception classes
describe the failure kinds and format consistent messages; the converter
logs them rather than letting them escape.

Event codes used by the converter:
- JXR-001: highlighting engine missing
- JXR-002: no source block found
- JXR-003: re-rendered line count mismatch
- JXR-004: unexpected conversion failure
- JXR-005: anchor count differs from extracted line count
- JXR-020: anchor mode fallback decision
- JXR-010: conversion succeeded
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jxr2prism.ingest.feature_logger import (
    log_conversion_decision,
    log_degraded_conversion,
)


class ConversionError(Exception):
    """Base class for conversion failures."""


class MissingDependencyError(ConversionError):
    """The re-tokenizing engine is not loaded."""

    def __init__(self, engine_name: str, cause: Exception | None = None) -> None:
        self.engine_name = engine_name
        self.cause = cause
        message = f"Highlighting engine '{engine_name}' is not available"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class MissingTargetError(ConversionError):
    """The document holds no block matching the configured selector."""

    def __init__(self, selector: str, source: Path | str | None = None) -> None:
        self.selector = selector
        self.source = source
        message = f"No block matching '{selector}' found"
        if source is not None:
            message += f" in {source}"
        super().__init__(message)


class LineCountMismatchError(ConversionError):
    """The engine changed the number of lines while highlighting."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Re-rendered line count {actual} does not match source line count {expected}"
        )


@dataclass
class ErrorContext:
    """Context attached to every record logged through ErrorManager."""

    source_path: Path | None = None
    source_module: str | None = None
    selector: str | None = None
    flags: dict[str, Any] = field(default_factory=dict)
    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_path": str(self.source_path) if self.source_path is not None else None,
            "source_module": self.source_module,
            "selector": self.selector,
            "flags": self.flags,
            "correlation_id": self.correlation_id,
        }


class ErrorManager:
    """Structured logger for conversion warnings, errors and decisions."""

    def __init__(self, context: ErrorContext | None = None) -> None:
        self.context = context or ErrorContext()
        self._logger = logging.getLogger(f"{__name__}.{self.context.source_module or 'unknown'}")

    def _build_log_data(
        self,
        event_code: str,
        extra: dict[str, Any] | None = None,
        exception: Exception | None = None,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {"event_code": event_code}
        data.update(self.context.to_dict())

        try:
            import pygments

            data["pygments_version"] = getattr(pygments, "__version__", "unknown")
        except ImportError:
            data["pygments_version"] = "not_installed"

        if extra:
            data.update(extra)
        if exception is not None:
            data["exception_class"] = type(exception).__name__
            data["exception_message"] = str(exception)
        return data

    def info(self, event_code: str, message: str, extra: dict[str, Any] | None = None) -> None:
        self._logger.info("%s: %s", event_code, message, extra=self._build_log_data(event_code, extra))

    def warn(
        self,
        event_code: str,
        message: str,
        extra: dict[str, Any] | None = None,
        exception: Exception | None = None,
    ) -> None:
        self._logger.warning(
            "%s: %s",
            event_code,
            message,
            extra=self._build_log_data(event_code, extra, exception),
        )

    def error(
        self,
        event_code: str,
        message: str,
        extra: dict[str, Any] | None = None,
        exception: Exception | None = None,
    ) -> None:
        self._logger.error(
            "%s: %s",
            event_code,
            message,
            extra=self._build_log_data(event_code, extra, exception),
        )

    def decision(
        self,
        event_code: str,
        decision_key: str,
        decision_value: Any,
        extra: dict[str, Any] | None = None,
    ) -> None:
        log_conversion_decision(
            self.context.source_path, decision_key, str(decision_value), extra
        )
        data = {"decision_key": decision_key, "decision_value": decision_value}
        if extra:
            data.update(extra)
        self._logger.info(
            "%s: %s=%s",
            event_code,
            decision_key,
            decision_value,
            extra=self._build_log_data(event_code, data),
        )

    def error_policy(
        self,
        feature: str,
        error_type: str,
        action: str,
        details: str | None = None,
        event_code: str | None = None,
    ) -> None:
        log_degraded_conversion(self.context.source_path, feature, error_type, action, details)
        if event_code:
            data = {
                "feature": feature,
                "error_type": error_type,
                "action": action,
                "details": details,
            }
            self._logger.warning(
                "%s: %s %s -> %s",
                event_code,
                feature,
                error_type,
                action,
                extra=self._build_log_data(event_code, data),
            )


__all__ = [
    "ConversionError",
    "ErrorContext",
    "ErrorManager",
    "LineCountMismatchError",
    "MissingDependencyError",
    "MissingTargetError",
]
