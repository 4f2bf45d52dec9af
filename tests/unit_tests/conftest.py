"""Shared test doubles for pipeline unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import pytest

from java2php.errors import EmptyResultError, RemoteServiceError


class StubTranslator:
    """Translator double prefixing content, failing on chosen markers."""

    def __init__(
        self,
        fail_on: Iterable[str] = (),
        empty_on: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self.fail_on = tuple(fail_on)
        self.empty_on = tuple(empty_on)
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def translate(self, content: str) -> str:
        self.calls.append(content)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if any(marker in content for marker in self.fail_on):
                raise RemoteServiceError("model refused")
            if any(marker in content for marker in self.empty_on):
                raise EmptyResultError("no result")
            return f"<?php\n// {content}"
        finally:
            self.in_flight -= 1


class RecordingReporter:
    """Progress sink recording every call."""

    def __init__(self) -> None:
        self.total = 0
        self.completed = 0
        self.failures: list[str] = []
        self.finished = False
        self.final_total: int | None = None

    def add_total(self, count: int = 1) -> None:
        self.total += count

    def set_total(self, total: int) -> None:
        self.total = total
        self.final_total = total

    def increment(self) -> None:
        self.completed += 1

    def report_failure(self, message: str) -> None:
        self.failures.append(message)

    def finish(self) -> None:
        self.finished = True


@pytest.fixture
def translator() -> StubTranslator:
    return StubTranslator()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def make_translator() -> type[StubTranslator]:
    """Expose the stub class for tests that need custom failure markers."""
    return StubTranslator
