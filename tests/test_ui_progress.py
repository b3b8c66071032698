from __future__ import annotations

from jxr2prism.ui.progress import ProgressReporter


def test_progress_pages_flow() -> None:
    with ProgressReporter() as pr:
        pr.emit("site:start", {"root": "site", "page_count": 3})
        assert "pages" in pr._tasks
        assert pr._totals.get("pages") == 3
        pr.emit("page:processed", {"path": "a.html", "status": "converted"})
        pr.emit("page:processed", {"path": "b.html", "status": "injected"})
        pr.emit("page:processed", {"path": "c.html", "status": "injected"})
        pr.emit("site:finalized", {"pages": 3, "converted": 1, "injected": 2})
        # pages task finalized and removed
        assert "pages" not in pr._tasks
        assert "pages" not in pr._totals
    assert pr.counts == {"converted": 1, "injected": 2}


def test_progress_failed_pages_are_counted() -> None:
    with ProgressReporter(transient=True) as pr:
        pr.emit("site:start", {"page_count": 2})
        pr.emit("page:failed", {"path": "bad.html", "error": "invalid start byte"})
        pr.emit("page:processed", {"path": "ok.html", "status": "unchanged"})
        task = pr.progress.tasks[0]
        assert task.completed == 2
    assert pr.counts == {"failed": 1, "unchanged": 1}


def test_progress_events_without_start() -> None:
    with ProgressReporter() as pr:
        pr.emit("page:processed", {"path": "a.html", "status": "unchanged"})
        pr.emit("site:finalized", {"pages": 1})
        pr.emit("unknown:event", {})
        assert pr._tasks == {}
