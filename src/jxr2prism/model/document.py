"""Data structures for source block conversion (extracted text, line index, result)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


def split_lines(text: str) -> list[str]:
    """Split text into physical lines.

    A single trailing newline terminates the last line rather than opening a
    new empty one, so ``"a\\nb\\n"`` and ``"a\\nb"`` both yield two lines.
    """

    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


@dataclass(frozen=True)
class LineAnchor:
    """A per-line anchor captured from the original rendered block."""

    label: str
    href: str | None
    name: str | None

    @property
    def identifier(self) -> str | None:
        if self.name:
            return self.name
        if self.href and self.href.startswith("#") and len(self.href) > 1:
            return self.href[1:]
        return None


@dataclass(frozen=True)
class ExtractedSource:
    text: str

    @classmethod
    def from_raw(cls, raw: str) -> ExtractedSource:
        return cls(text=normalize_newlines(raw))

    @property
    def lines(self) -> list[str]:
        return split_lines(self.text)

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class HighlightedOutput:
    """Markup emitted by the highlighting engine for an ExtractedSource."""

    markup: str

    def lines(self) -> list[str]:
        return split_lines(normalize_newlines(self.markup))


@dataclass(frozen=True)
class LineEntry:
    number: int
    identifier: str
    label: str

    @property
    def href(self) -> str:
        return f"#{self.identifier}"


@dataclass(frozen=True)
class LineIndex:
    entries: tuple[LineEntry, ...] = ()

    @classmethod
    def sequential(cls, count: int, prefix: str = "L") -> LineIndex:
        return cls(
            entries=tuple(
                LineEntry(number=n, identifier=f"{prefix}{n}", label=str(n))
                for n in range(1, count + 1)
            )
        )

    @classmethod
    def from_anchors(cls, anchors: list[LineAnchor]) -> LineIndex:
        """Build an index reusing the original anchor identifiers and labels.

        Raises ValueError if any anchor lacks a usable identifier.
        """

        entries: list[LineEntry] = []
        for n, anchor in enumerate(anchors, start=1):
            identifier = anchor.identifier
            if not identifier:
                raise ValueError(f"Anchor for line {n} has no name or fragment href")
            entries.append(LineEntry(number=n, identifier=identifier, label=anchor.label or str(n)))
        return cls(entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def identifiers(self) -> list[str]:
        return [e.identifier for e in self.entries]


@dataclass(frozen=True)
class ConvertedBlock:
    """Replacement structure: a line-number column beside the highlighted code.

    An empty ``line_index`` means numbering was skipped.
    """

    line_index: LineIndex
    code_lines: tuple[str, ...]
    language: str

    @property
    def numbered(self) -> bool:
        return len(self.line_index) > 0


class ConversionStatus(Enum):
    """Outcome of a single conversion attempt."""

    CONVERTED = "converted"
    CONVERTED_WITHOUT_NUMBERS = "converted-without-numbers"
    MISSING_DEPENDENCY = "missing-dependency"
    MISSING_TARGET = "missing-target"
    ALREADY_PROCESSED = "already-processed"
    FAILED = "failed"


@dataclass
class ConversionResult:
    status: ConversionStatus
    line_count: int = 0
    anchor_count: int = 0
    message: str | None = None
    identifiers: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.status in (
            ConversionStatus.CONVERTED,
            ConversionStatus.CONVERTED_WITHOUT_NUMBERS,
        )


__all__ = [
    "ConversionResult",
    "ConversionStatus",
    "ConvertedBlock",
    "ExtractedSource",
    "HighlightedOutput",
    "LineAnchor",
    "LineEntry",
    "LineIndex",
    "normalize_newlines",
    "split_lines",
]
