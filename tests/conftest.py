import asyncio
import html
import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from jxr2prism.highlight.engine import CodeElement  # noqa: E402
from jxr2prism.model.document import LineAnchor  # noqa: E402

JXR_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Foo xref</title>
</head>
<body>
<div id="overview"><a href="../../../apidocs/com/example/Foo.html"><strong>View Javadoc</strong></a></div>
<pre>
<a class="jxr_linenumber" name="L1" href="#L1">1</a>   <strong class="jxr_keyword">package</strong> com.example;
<a class="jxr_linenumber" name="L2" href="#L2">2</a>
<a class="jxr_linenumber" name="L3" href="#L3">3</a>   <strong class="jxr_keyword">public</strong> <strong class="jxr_keyword">class</strong> Foo {
<a class="jxr_linenumber" name="L4" href="#L4">4</a>       <em class="jxr_comment">// hi &amp; bye</em>
<a class="jxr_linenumber" name="L5" href="#L5">5</a>   }
</pre>
<hr/>
</body>
</html>
"""

JXR_SOURCE = (
    "   package com.example;\n"
    "\n"
    "   public class Foo {\n"
    "       // hi & bye\n"
    "   }\n"
)


def jxr_block(lines: list[str]) -> str:
    """Build a minimal JXR <pre> block with one anchor per line."""
    rows = [
        f'<a class="jxr_linenumber" name="L{n}" href="#L{n}">{n}</a>{html.escape(line)}'
        for n, line in enumerate(lines, start=1)
    ]
    return "<pre>" + "\n".join(rows) + "</pre>"


class EchoEngine:
    """Engine that escapes the text without coloring it."""

    name = "echo"

    def __init__(self) -> None:
        self.calls = 0

    def is_available(self) -> bool:
        return True

    def highlight_element(self, element: CodeElement) -> None:
        self.calls += 1
        element.markup = html.escape(element.text, quote=False)


class DroppingEngine(EchoEngine):
    """Engine that loses the last line, as a lossy highlighter might."""

    name = "dropping"

    def highlight_element(self, element: CodeElement) -> None:
        super().highlight_element(element)
        lines = (element.markup or "").split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        element.markup = "\n".join(lines[:-1])


class UnavailableEngine(EchoEngine):
    name = "unavailable"

    def is_available(self) -> bool:
        return False


class ExplodingEngine(EchoEngine):
    name = "exploding"

    def highlight_element(self, element: CodeElement) -> None:
        raise RuntimeError("tokenizer crashed")


class AsyncEchoEngine:
    name = "async-echo"

    def __init__(self) -> None:
        self.completed = False

    def is_available(self) -> bool:
        return True

    async def highlight_element(self, element: CodeElement) -> None:
        await asyncio.sleep(0)
        element.markup = html.escape(element.text, quote=False)
        self.completed = True


class FakeTree:
    """In-memory DocumentTree: one block made of plain source lines."""

    def __init__(self, lines: list[str] | None, source: str | None = None) -> None:
        self.source = source
        self.block: dict | None = None if lines is None else {"lines": list(lines)}
        self.replacements: list[str] = []

    def find_block(self, selector: str) -> dict | None:
        return self.block

    def is_processed(self, block: dict, attribute: str) -> bool:
        return bool(block.get("processed"))

    def extract_text(self, block: dict, anchor_selector: str) -> str:
        return "".join(f"{line}\n" for line in block["lines"])

    def collect_anchors(self, block: dict, anchor_selector: str) -> list[LineAnchor]:
        return [
            LineAnchor(label=str(n), href=f"#L{n}", name=f"L{n}")
            for n in range(1, len(block["lines"]) + 1)
        ]

    def replace(self, block: dict, markup: str) -> None:
        self.replacements.append(markup)
        self.block = {"processed": True, "markup": markup}

    def render(self) -> str:
        return self.replacements[-1] if self.replacements else ""


@pytest.fixture
def jxr_page() -> str:
    return JXR_PAGE


@pytest.fixture
def jxr_source() -> str:
    return JXR_SOURCE


@pytest.fixture
def block_markup():
    return jxr_block


@pytest.fixture
def echo_engine() -> EchoEngine:
    return EchoEngine()


@pytest.fixture
def engines() -> dict[str, type]:
    return {
        "echo": EchoEngine,
        "dropping": DroppingEngine,
        "unavailable": UnavailableEngine,
        "exploding": ExplodingEngine,
        "async": AsyncEchoEngine,
    }


@pytest.fixture
def fake_tree():
    return FakeTree


@pytest.fixture
def make_site(tmp_path: Path):
    """Create pages under <tmp>/<stage>/ from a {relative path: html} mapping."""

    def _make(pages: dict[str, str], stage: str = "site") -> Path:
        root = tmp_path / stage
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in pages.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def isolate_logging():
    """Isolate logging configuration between tests.

    The CLI reconfigures the root logger (basicConfig with force=True); use
    this fixture in tests that invoke it so later tests see the original
    handlers and level.
    """
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    logging.root.handlers.clear()
    logging.root.addHandler(logging.NullHandler())

    yield

    logging.root.handlers.clear()
    logging.root.handlers.extend(original_handlers)
    logging.root.setLevel(original_level)
