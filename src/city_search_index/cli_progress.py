"""Rich progress bar shown while cities are indexed.

The bar is drawn on stderr so it never interleaves with the build summary
printed on stdout, and it counts records in a named unit ("cities").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import override

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .protocols import ProgressReporter


def _build_progress() -> Progress:
    return Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("{task.fields[unit]}"),
        TimeElapsedColumn(),
        console=Console(stderr=True),
        transient=True,
    )


@dataclass
class CliProgressReporter(ProgressReporter):
    """Progress reporter for the indexing step of `city-index build`."""

    unit: str = "cities"
    _progress: Progress = field(default_factory=_build_progress)
    _task_id: TaskID | None = None
    completed: int = 0

    @override
    def start(self, label: str, total: int | None) -> None:
        if self._task_id is not None:
            self.finish()
        self._progress.start()
        self._task_id = self._progress.add_task(label, total=total, unit=self.unit)
        self.completed = 0

    @override
    def advance(self, count: int) -> None:
        if self._task_id is None:
            return
        self._progress.advance(self._task_id, count)
        self.completed += count

    @override
    def finish(self) -> None:
        if self._task_id is None:
            return
        self._progress.remove_task(self._task_id)
        self._progress.stop()
        self._task_id = None
