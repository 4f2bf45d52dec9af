"""Application-layer result objects."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from java2php.errors import Java2PhpError
from java2php.types import RunMode


@dataclass(frozen=True)
class ConversionTask:
    """Unit of work translating one source file."""

    source_path: Path
    destination_path: Path


@dataclass(frozen=True)
class ConversionOutcome:
    """Structured outcome of one conversion task.

    ``error`` is ``None`` for a success. A failure keeps the destination path
    so that the reported message names the file that was not produced.
    Errors outside the package hierarchy are reported with their type name.
    """

    task: ConversionTask
    error: Exception | None = None

    @classmethod
    def success(cls, task: ConversionTask) -> ConversionOutcome:
        return cls(task=task)

    @classmethod
    def failure(cls, task: ConversionTask, error: Exception) -> ConversionOutcome:
        return cls(task=task, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def destination_path(self) -> Path:
        return self.task.destination_path

    @property
    def message(self) -> str:
        """One-line human readable description of the outcome."""
        if self.error is None:
            return f"{self.destination_path}: ok"
        if isinstance(self.error, Java2PhpError):
            return f"{self.destination_path}: {self.error}"
        return f"{self.destination_path}: {type(self.error).__name__}: {self.error}"


@dataclass(frozen=True)
class RunSummary:
    """Aggregate result of a conversion run."""

    mode: RunMode
    outcomes: Sequence[ConversionOutcome] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failures(self) -> list[ConversionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def failed(self) -> int:
        return len(self.failures)
