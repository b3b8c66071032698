"""Tree abstraction over an HTML document.

The converter only needs five things from a document: locate the source block,
tell whether it was already converted, read its text without the line anchors,
list those anchors, and swap the block for new markup. ``DocumentTree`` names
that surface so the converter can run against a fake tree in tests;
``SoupDocument`` implements it with BeautifulSoup.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Protocol

from bs4 import BeautifulSoup, NavigableString, Tag

from jxr2prism.model.document import LineAnchor

PARSER = "html.parser"

# Stands in for a removed line anchor while the block text is read
LINE_MARK = "\x00"


class DocumentTree(Protocol):
    """Minimal protocol for the document model the converter works on."""

    source: Path | str | None

    def find_block(self, selector: str) -> Any | None:  # pragma: no cover - typing
        ...

    def is_processed(self, block: Any, attribute: str) -> bool:  # pragma: no cover - typing
        ...

    def extract_text(self, block: Any, anchor_selector: str) -> str:  # pragma: no cover - typing
        ...

    def collect_anchors(
        self, block: Any, anchor_selector: str
    ) -> list[LineAnchor]:  # pragma: no cover - typing
        ...

    def replace(self, block: Any, markup: str) -> None:  # pragma: no cover - typing
        ...

    def render(self) -> str:  # pragma: no cover - typing
        ...


class SoupDocument:
    """DocumentTree backed by a BeautifulSoup parse tree."""

    def __init__(self, soup: BeautifulSoup, source: Path | str | None = None) -> None:
        self.soup = soup
        self.source = source

    @classmethod
    def from_html(cls, markup: str, source: Path | str | None = None) -> SoupDocument:
        return cls(BeautifulSoup(markup, PARSER), source=source)

    @classmethod
    def from_path(cls, path: Path, encoding: str = "utf-8") -> SoupDocument:
        return cls.from_html(path.read_text(encoding=encoding), source=path)

    def find_block(self, selector: str) -> Tag | None:
        return self.soup.select_one(selector)

    def is_processed(self, block: Tag, attribute: str) -> bool:
        # A converted container holds its own <pre>, which also matches "pre"
        if block.has_attr(attribute):
            return True
        return block.find_parent(attrs={attribute: True}) is not None

    def extract_text(self, block: Tag, anchor_selector: str) -> str:
        """Return the block's text with all line anchors removed.

        Each anchor opens one source line that runs up to the next anchor, so
        a blank first or last line still counts as a line. Every anchored line
        is returned newline-terminated. Works on a deep copy; the block in the
        document is not modified.
        """

        clone = copy.copy(block)
        # HTML ignores a newline directly after the <pre> start tag
        first = clone.contents[0] if clone.contents else None
        if (
            block.name == "pre"
            and type(first) is NavigableString
            and first.startswith("\n")
        ):
            first.replace_with(NavigableString(first[1:]))

        for anchor in clone.select(anchor_selector):
            anchor.replace_with(NavigableString(LINE_MARK))
        text = clone.get_text()
        if LINE_MARK not in text:
            return text

        prefix, *segments = text.split(LINE_MARK)
        return prefix + "".join(_chomp(segment) + "\n" for segment in segments)

    def collect_anchors(self, block: Tag, anchor_selector: str) -> list[LineAnchor]:
        anchors: list[LineAnchor] = []
        for link in block.select(anchor_selector):
            anchors.append(
                LineAnchor(
                    label=link.get_text().strip(),
                    href=_attr(link, "href"),
                    name=_attr(link, "name") or _attr(link, "id"),
                )
            )
        return anchors

    def replace(self, block: Tag, markup: str) -> None:
        fragment = BeautifulSoup(markup, PARSER)
        replacement = fragment.find(True)
        if replacement is None:
            raise ValueError("Replacement markup contains no element")
        block.replace_with(replacement.extract())

    def render(self) -> str:
        return str(self.soup)


def _chomp(segment: str) -> str:
    return segment[:-1] if segment.endswith("\n") else segment


def _attr(tag: Tag, name: str) -> str | None:
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


__all__ = [
    "DocumentTree",
    "SoupDocument",
]
