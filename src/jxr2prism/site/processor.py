"""Walk a generated site and apply the page enhancements.

For every HTML page under the site root: JXR source pages get their source
block re-highlighted, and every page gets the stylesheet/script references
for its page type. Pages are written back only when their content changed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from jxr2prism.convert.converter import SourceRenderConverter
from jxr2prism.convert.session import DocumentSession, schedule_conversion
from jxr2prism.fileio import atomic_write_text
from jxr2prism.ingest.html_document import SoupDocument
from jxr2prism.model.document import ConversionStatus
from jxr2prism.model.options import SiteOptions
from jxr2prism.site.inject import inject_styles, is_injected
from jxr2prism.site.page_types import PageType, detect_page_type, relative_depth

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, dict[str, int | str]], None] | None

JXR_ANCHOR_CLASS = "jxr_linenumber"


@dataclass
class SiteReport:
    root: Path | None = None
    pages: int = 0
    converted: int = 0
    injected: int = 0
    failed: int = 0


def _safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    if on_progress is None:
        return
    with suppress(Exception):
        on_progress(event, payload)


def resolve_site_root(build_dir: Path) -> Path | None:
    """Prefer ``staging/`` over ``site/``; None when neither exists."""
    for name in ("staging", "site"):
        candidate = build_dir / name
        if candidate.is_dir():
            return candidate
    return None


def iter_pages(root: Path, styles_dir: str) -> list[Path]:
    styles_root = root / styles_dir
    return sorted(
        p for p in root.rglob("*.html") if p.is_file() and styles_root not in p.parents
    )


def process_page(
    path: Path,
    root: Path,
    options: SiteOptions,
    converter: SourceRenderConverter | None,
) -> tuple[DocumentSession, str, str]:
    """Enhance one page; returns its session, status label and new content.

    The status is one of ``converted``, ``injected`` or ``unchanged``.
    """

    rel = path.relative_to(root).as_posix()
    page_type = detect_page_type(rel)
    original = path.read_text(encoding="utf-8")

    session = DocumentSession(path=path)
    if (
        options.convert_jxr
        and converter is not None
        and page_type is PageType.JXR
        and JXR_ANCHOR_CLASS in original
    ):
        schedule_conversion(session, converter)
        session.load(SoupDocument.from_html(original, source=path))

    content = original
    if session.results and session.results[-1].changed and session.document is not None:
        content = session.document.render()

    status = "converted" if content != original else "unchanged"
    if options.inject and not is_injected(content):
        content = inject_styles(content, page_type, relative_depth(rel), options.styles_dir)
        session.injected_stylesheet = page_type.stylesheet
        session.injected_script = True
        if status == "unchanged":
            status = "injected"

    return session, status, content


def process_site(
    build_dir: Path,
    options: SiteOptions,
    converter: SourceRenderConverter | None,
    on_progress: ProgressCallback = None,
) -> SiteReport:
    if options.skip:
        logger.info("Skipping site processing")
        return SiteReport()

    root = resolve_site_root(build_dir)
    if root is None:
        logger.info("No staging or site directory under %s; nothing to process", build_dir)
        return SiteReport()

    (root / options.styles_dir).mkdir(parents=True, exist_ok=True)
    pages = iter_pages(root, options.styles_dir)
    report = SiteReport(root=root)
    _safe_emit(on_progress, "site:start", {"root": str(root), "page_count": len(pages)})

    for path in pages:
        report.pages += 1
        try:
            session, status, content = process_page(path, root, options, converter)
            if status != "unchanged":
                atomic_write_text(path, content)
        except (OSError, UnicodeDecodeError) as exc:
            report.failed += 1
            logger.warning("Failed to process %s: %s", path, exc)
            _safe_emit(on_progress, "page:failed", {"path": str(path), "error": str(exc)})
            continue

        if any(r.status is ConversionStatus.FAILED for r in session.results):
            report.failed += 1
        if status == "converted":
            report.converted += 1
        if session.injected_stylesheet:
            report.injected += 1
        session.discard()
        _safe_emit(on_progress, "page:processed", {"path": str(path), "status": status})

    _safe_emit(
        on_progress,
        "site:finalized",
        {"pages": report.pages, "converted": report.converted, "injected": report.injected},
    )
    logger.info(
        "Processed %d pages under %s (%d converted, %d injected, %d failed)",
        report.pages,
        root,
        report.converted,
        report.injected,
        report.failed,
    )
    return report


__all__ = ["SiteReport", "iter_pages", "process_page", "process_site", "resolve_site_root"]
