"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from typing import Protocol


class Translator(Protocol):
    """Translate one source file's text through a remote service."""

    async def translate(self, content: str) -> str:
        """Return translated text.

        Raises
        ------
        TranslationError
            One distinct subclass per failure kind; never retried.
        """


class ProgressSink(Protocol):
    """Receive per-task progress from the orchestrator."""

    def add_total(self, count: int = 1) -> None:
        """Grow the expected number of tasks."""

    def set_total(self, total: int) -> None:
        """Finalize the expected number of tasks."""

    def increment(self) -> None:
        """Record one finished task, successful or not."""

    def report_failure(self, message: str) -> None:
        """Print one failure line without disturbing the counter."""

    def finish(self) -> None:
        """Render the terminal state."""
