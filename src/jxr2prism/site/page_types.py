from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath


class PageType(Enum):
    """Kind of generated documentation page, each with its own stylesheet."""

    LANDING = "landing"
    COVERAGE = "coverage"
    JXR = "jxr"
    JAVADOC = "javadoc"
    SITE = "site"

    @property
    def stylesheet(self) -> str:
        return f"terminaljavadocs-{self.value}.min.css"


LANDING_PAGES = frozenset({"coverage.html", "source-xref.html"})
SCRIPT_NAME = "terminaljavadocs.min.js"


def detect_page_type(relative_path: str | PurePosixPath) -> PageType:
    """Classify a page by its path relative to the site root.

    Landing pages are recognized by file name; report pages by the directory
    the report plugin writes to (``jacoco``, ``xref``, ``apidocs`` ...).
    """

    path = PurePosixPath(str(relative_path).replace("\\", "/"))
    if path.name in LANDING_PAGES and len(path.parts) == 1:
        return PageType.LANDING

    dirs = set(path.parts[:-1])
    if "jacoco" in dirs:
        return PageType.COVERAGE
    if dirs & {"xref", "xref-test"}:
        return PageType.JXR
    if dirs & {"apidocs", "testapidocs"}:
        return PageType.JAVADOC
    return PageType.SITE


def relative_depth(relative_path: str | PurePosixPath) -> int:
    """Number of directories between the site root and the page."""
    path = PurePosixPath(str(relative_path).replace("\\", "/"))
    return len(path.parts) - 1


__all__ = ["LANDING_PAGES", "SCRIPT_NAME", "PageType", "detect_page_type", "relative_depth"]
