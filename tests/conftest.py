# tests/conftest.py

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import pytest
import pytest_asyncio

from taskrunner.config import RunnerConfig, reset_settings
from taskrunner.tasks.task_runner import TaskRunner

from .fakes import EventRecorder


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Settings are cached process-wide; never leak them between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest_asyncio.fixture()
async def make_runner(recorder: EventRecorder) -> AsyncIterator[Callable[..., TaskRunner]]:
    """
    Factory for runners wired to `recorder`.

    The recorder is subscribed before auto-start, so it also sees the initial "started".
    Every runner built here is closed on teardown.
    """
    runners: list[TaskRunner] = []

    def _make(worker: Any, **options: Any) -> TaskRunner:
        auto_start = options.pop("auto_start", True)
        config = RunnerConfig(auto_start=False, **options)
        runner = TaskRunner(worker, config)
        runner.on(recorder)
        if auto_start:
            runner.start()
        runners.append(runner)
        return runner

    yield _make

    for runner in runners:
        await runner.aclose()
