"""Rich progress display driven by pipeline events.

Pipeline functions report progress through a plain ``on_progress(event,
payload)`` callback and stay free of UI code; ProgressReporter turns those
events into Rich progress tasks.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressReporter:
    def __init__(self, console: Console | None = None, transient: bool = False) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=transient,
        )
        self._tasks: dict[str, TaskID] = {}
        self._totals: dict[str, int] = {}
        self.counts: dict[str, int] = {}

    def __enter__(self) -> ProgressReporter:
        self.progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.progress.stop()

    def add_step(self, description: str, total: int | None = None) -> TaskID:
        return self.progress.add_task(description, total=total)

    def finish_task(self, task_id: TaskID) -> None:
        task = self.progress.tasks[self.progress.task_ids.index(task_id)]
        if task.total is not None:
            self.progress.update(task_id, completed=task.total)
        self.progress.remove_task(task_id)

    def _finish_named(self, key: str) -> None:
        task_id = self._tasks.pop(key, None)
        if task_id is not None:
            self.finish_task(task_id)
        self._totals.pop(key, None)

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        if event == "site:start":
            total = int(payload.get("page_count", 0))
            self._totals["pages"] = total
            self._tasks["pages"] = self.add_step("Processing pages", total=total)
        elif event in ("page:processed", "page:failed"):
            key = "failed" if event == "page:failed" else str(payload.get("status", "unchanged"))
            self.counts[key] = self.counts.get(key, 0) + 1
            if "pages" in self._tasks:
                self.progress.advance(self._tasks["pages"])
            if event == "page:failed":
                self.progress.console.print(
                    f"[yellow]⚠️  Failed to process {payload.get('path')}: {payload.get('error')}"
                )
        elif event == "site:finalized":
            self._finish_named("pages")


__all__ = ["ProgressReporter"]
