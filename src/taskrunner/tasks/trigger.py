# src/taskrunner/tasks/trigger.py

from __future__ import annotations

"""
Debounced trigger.

Collapses bursts of signal() calls into a single trailing invocation of an
async callback: the callback runs `delay_ms` after the *last* signal. With a
zero delay the invocation is scheduled for the next loop iteration.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(self, callback: Callable[[], Awaitable[None]], delay_ms: int, *, name: str = "trigger") -> None:
        self._callback = callback
        self._delay_s = max(0, int(delay_ms)) / 1000.0
        self._name = name

        self._handle: asyncio.Handle | None = None
        self._pending = False
        self._last_signal: float | None = None
        self._task: asyncio.Task[None] | None = None
        self.fired = 0

    @property
    def pending(self) -> bool:
        """True while an invocation is scheduled but has not run yet."""
        return self._pending

    @property
    def last_signal(self) -> float | None:
        return self._last_signal

    @property
    def task(self) -> asyncio.Task[None] | None:
        """Task of the most recent invocation (may already be done)."""
        return self._task

    def signal(self) -> None:
        self._last_signal = time.monotonic()
        self._pending = True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("%s: signal without a running loop; left pending", self._name)
            return

        if self._handle is not None:
            self._handle.cancel()

        if self._delay_s > 0:
            self._handle = loop.call_later(self._delay_s, self._fire)
        else:
            self._handle = loop.call_soon(self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = False

    def _fire(self) -> None:
        self._handle = None
        self._pending = False
        self.fired += 1

        task = asyncio.get_running_loop().create_task(self._callback())
        task.add_done_callback(self._on_done)
        self._task = task

    def _on_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s: callback failed", self._name, exc_info=exc)
