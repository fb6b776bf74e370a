# src/taskrunner/tasks/task_api.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from .task_models import EventKind
from .task_runner import TaskRunner

logger = logging.getLogger(__name__)


async def wait(ms: int) -> None:
    """Sleep for `ms` milliseconds."""
    await asyncio.sleep(max(0, int(ms)) / 1000.0)


def submit_many(runner: TaskRunner, payloads: Iterable[Any]) -> list[int]:
    """Submit payloads in order; returns their ids."""
    return [runner.submit(p) for p in payloads]


async def run_until_empty(runner: TaskRunner, *, timeout: float | None = None) -> None:
    """
    Start the runner (if needed) and wait until its queue is empty.

    Returns immediately when nothing is pending. Raises asyncio.TimeoutError
    if the queue does not empty in time. The runner is left RUNNING.
    """
    if runner.is_empty and not runner.is_draining:
        return

    empty = runner.events.wait_for(EventKind.QUEUE_EMPTY)
    runner.start()
    try:
        await asyncio.wait_for(empty, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("run_until_empty timed out pending=%s", len(runner))
        raise
