from __future__ import annotations

import re

from jxr2prism.site.page_types import SCRIPT_NAME, PageType

MARKER = "terminal-javadocs-injected"

_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_HEAD_OPEN_RE = re.compile(r"<head(\s[^>]*)?>", re.IGNORECASE)


def is_injected(html: str) -> bool:
    return MARKER in (html or "")


def build_injection(page_type: PageType, depth: int, styles_dir: str = "terminal-styles") -> str:
    """Markup referencing the page type's stylesheet and the shared script.

    Paths are relative: a page ``depth`` directories below the site root gets
    ``depth`` leading ``../`` segments.
    """

    if depth < 0:
        raise ValueError("depth must be non-negative")
    base = "../" * depth + styles_dir.strip("/")
    return (
        f"<!-- {MARKER} [{page_type.value}] -->\n"
        f'<link rel="stylesheet" href="{base}/{page_type.stylesheet}" data-terminaljavadocs="true">\n'
        f'<script src="{base}/{SCRIPT_NAME}" data-terminaljavadocs="true" defer></script>\n'
    )


def inject_styles(
    html: str, page_type: PageType, depth: int, styles_dir: str = "terminal-styles"
) -> str:
    """Insert style references right before ``</head>``.

    Idempotent: content that already carries the injection marker is returned
    unchanged. Without ``</head>`` the markup goes after ``<head>``; without
    either it is prepended.
    """

    if is_injected(html):
        return html
    snippet = build_injection(page_type, depth, styles_dir)

    m = _HEAD_CLOSE_RE.search(html)
    if m:
        return html[: m.start()] + snippet + html[m.start() :]
    m = _HEAD_OPEN_RE.search(html)
    if m:
        return html[: m.end()] + snippet + html[m.end() :]
    return snippet + html


__all__ = ["MARKER", "build_injection", "inject_styles", "is_injected"]
