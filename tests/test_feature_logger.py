from __future__ import annotations

import logging
from pathlib import Path

import pytest

from jxr2prism.highlight.engine import PygmentsHighlightEngine
from jxr2prism.ingest.feature_logger import (
    log_conversion_decision,
    log_converter_configuration,
    log_degraded_conversion,
    log_engine_availability,
)
from jxr2prism.model.options import AnchorMode, ConverterOptions


def test_converter_configuration(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        log_converter_configuration(ConverterOptions(anchor_mode=AnchorMode.PRESERVE))

    assert "Language: java" in caplog.text
    assert "Anchor mode: preserve" in caplog.text


def test_engine_available_for_language(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        assert log_engine_availability(PygmentsHighlightEngine(), "java")

    assert "Highlighting engine 'pygments': available for 'java'" in caplog.text


def test_engine_without_grammar(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert log_engine_availability(PygmentsHighlightEngine(), "no-such-grammar")

    assert "no grammar for 'no-such-grammar'" in caplog.text


def test_engine_unavailable(engines, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert not log_engine_availability(engines["unavailable"](), "java")

    assert "'unavailable': unavailable, JXR highlighting is kept" in caplog.text


def test_conversion_decision_names_the_page(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        log_conversion_decision(Path("xref/Foo.html"), "anchor_mode", "sequential")

    assert f"{Path('xref/Foo.html')}: anchor_mode=sequential" in caplog.text


def test_degraded_conversion_with_details(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        log_degraded_conversion("Foo.html", "Line numbers", "line_count_mismatch", "render_unnumbered", "5 != 4")

    assert "Foo.html: Line numbers degraded by line_count_mismatch -> render_unnumbered (5 != 4)" in caplog.text
