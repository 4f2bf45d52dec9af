"""Terminal progress reporting for tree conversions."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import TracebackType

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass(frozen=True)
class ProgressState:
    """Snapshot of the reporter counters."""

    total: int
    completed: int


class ProgressReporter:
    """Track completed conversions and print failures above the bar.

    The counters are guarded by a lock, so ``increment`` and
    ``report_failure`` may be called from asyncio tasks or worker threads.

    Parameters
    ----------
    total : int, default=0
        Initial expected count; may grow with :meth:`add_total` or be
        finalized later with :meth:`set_total`.
    console : rich.console.Console | None, default=None
        Output console; failures and the bar go to stderr by default.
    enabled : bool, default=True
        Render the bar. When disabled only failure lines are printed.
    """

    def __init__(
        self,
        total: int = 0,
        *,
        console: Console | None = None,
        enabled: bool = True,
    ) -> None:
        if total < 0:
            raise ValueError("total must be >= 0")
        self._lock = threading.Lock()
        self._total = total
        self._completed = 0
        self._finished = False
        self.console = console or Console(stderr=True)
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        if enabled:
            self._progress = Progress(
                TextColumn("[bold blue]Translating"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=self.console,
                transient=False,
            )
            self._task_id = self._progress.add_task("convert", total=total)
            self._progress.start()

    @property
    def state(self) -> ProgressState:
        with self._lock:
            return ProgressState(total=self._total, completed=self._completed)

    def add_total(self, count: int = 1) -> None:
        """Grow the expected total while tasks are still being spawned."""
        with self._lock:
            self._total += count
            self._render()

    def set_total(self, total: int) -> None:
        """Finalize the expected total; never below what already completed."""
        with self._lock:
            if total < self._completed:
                raise ValueError(
                    f"total {total} is below completed count {self._completed}"
                )
            self._total = total
            self._render()

    def increment(self) -> None:
        """Record one finished conversion, successful or not."""
        with self._lock:
            self._completed += 1
            if self._completed > self._total:
                self._total = self._completed
            self._render()

    def report_failure(self, message: str) -> None:
        """Print one failure line immediately, out of band from the bar."""
        line = f"[red]✗[/red] {escape(message)}"
        if self._progress is not None:
            self._progress.console.print(line, highlight=False, soft_wrap=True)
        else:
            self.console.print(line, highlight=False, soft_wrap=True)

    def finish(self) -> None:
        """Render the terminal state and release the live display."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
            self._render()
        if self._progress is not None:
            self._progress.stop()

    def _render(self) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id, total=self._total, completed=self._completed
        )

    def __enter__(self) -> ProgressReporter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.finish()
