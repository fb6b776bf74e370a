# src/taskrunner/tasks/task_runner.py

from __future__ import annotations

"""
Task runner.

A bounded-concurrency dispatch loop that:
- holds submitted payloads in a FIFO store,
- is entered through a debounced trigger (bursts of submits collapse into one entry),
- drains the store in batches of up to `concurrency` records, one full batch at a time,
- reports lifecycle and per-task outcomes through a Notifier,
- optionally re-submits failed payloads at the tail of the queue.

Everything runs on one asyncio event loop; the runner must be driven from that loop.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..config import RunnerConfig
from ..core.ports import EventListener, Worker
from .notifier import Notifier
from .task_models import (
    DrainFinished,
    EventKind,
    LoopState,
    Paused,
    QueueEmpty,
    RunnerState,
    Started,
    Stopped,
    TaskAdded,
    TaskDropped,
    TaskFailed,
    TaskRecord,
    TaskStarted,
    TaskSucceeded,
)
from .task_store import TaskStore
from .trigger import Debouncer

logger = logging.getLogger(__name__)


class TaskRunner:
    def __init__(self, worker: Worker, config: RunnerConfig | None = None, **overrides: Any) -> None:
        if not callable(worker):
            raise TypeError("worker must be callable")

        self._worker = worker
        self._config = (config or RunnerConfig()).with_overrides(**overrides)

        self._store = TaskStore()
        self._events = Notifier()
        self._state = RunnerState.STOPPED
        self._loop_state = LoopState.IDLE
        self._drain_task: asyncio.Task[Any] | None = None
        self._trigger = Debouncer(self._drain, self._config.inter_batch_delay_ms, name="task-runner")

        if self._config.auto_start:
            self.start()

    # ---- read-only views ----

    @property
    def config(self) -> RunnerConfig:
        return self._config

    @property
    def events(self) -> Notifier:
        return self._events

    @property
    def trigger(self) -> Debouncer:
        return self._trigger

    @property
    def state(self) -> RunnerState:
        return self._state

    @property
    def loop_state(self) -> LoopState:
        return self._loop_state

    @property
    def is_draining(self) -> bool:
        return self._loop_state is LoopState.DRAINING

    @property
    def is_empty(self) -> bool:
        return self._store.is_empty

    @property
    def pending(self) -> list[TaskRecord]:
        """Snapshot of records still in the store (including in-flight ones)."""
        return list(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def on(self, listener: EventListener, *kinds: EventKind) -> Callable[[], None]:
        return self._events.subscribe(listener, *kinds)

    # ---- store operations ----

    def submit(self, payload: Any) -> int:
        record = self._store.add(payload)
        self._events.emit(TaskAdded(record))
        self._trigger.signal()
        return record.id

    def remove(self, task_id: int) -> None:
        self._store.remove(task_id)

    def clear(self) -> None:
        for record in self._store.clear():
            self._events.emit(TaskDropped(record))
        self._events.emit(DrainFinished())

    # ---- state machine ----

    def start(self) -> None:
        if self._state is RunnerState.RUNNING:
            return
        self._state = RunnerState.RUNNING
        logger.info("Runner started pending=%s", len(self._store))
        self._events.emit(Started())
        self._trigger.signal()

    def pause(self) -> None:
        if self._state is not RunnerState.RUNNING:
            return
        self._state = RunnerState.PAUSED
        logger.info("Runner paused pending=%s", len(self._store))
        self._events.emit(Paused())

    def stop(self) -> None:
        if self._state is RunnerState.STOPPED:
            return
        self._state = RunnerState.STOPPED
        logger.info("Runner stopping, dropping pending=%s", len(self._store))
        self.clear()
        self._events.emit(Stopped())

    async def wait_idle(self) -> None:
        """Wait for the active dispatch loop (if any) to finish."""
        task = self._drain_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            await asyncio.shield(task)

    async def aclose(self) -> None:
        """
        Stop, drop the pending trigger and wait for in-flight work to settle.

        Payloads re-submitted by in-flight failures (retry_on_failure) are dropped
        too, so a closed runner is always empty.
        """
        self.stop()
        self._trigger.cancel()
        await self.wait_idle()
        if not self._store.is_empty:
            self.clear()
        self._trigger.cancel()

    # ---- dispatch loop ----

    def _should_continue(self) -> bool:
        return self._state is RunnerState.RUNNING and not self._store.is_empty

    async def _drain(self) -> None:
        if self._state is not RunnerState.RUNNING:
            return
        if self._loop_state is LoopState.DRAINING:
            return
        if self._store.is_empty:
            return

        self._loop_state = LoopState.DRAINING
        self._drain_task = asyncio.current_task()
        delay_s = self._config.inter_batch_delay_s
        batches = 0

        try:
            while self._should_continue():
                if delay_s > 0:
                    await asyncio.sleep(delay_s)
                    # pause()/stop() during the wait withholds this batch
                    if not self._should_continue():
                        break

                batch = self._store.head(self._config.concurrency)
                batches += 1
                logger.debug("Dispatching batch=%s ids=%s", batches, [r.id for r in batch])

                await asyncio.gather(*(self._run_one(record) for record in batch))
        finally:
            self._loop_state = LoopState.IDLE
            self._drain_task = None

        logger.debug("Drain finished batches=%s pending=%s", batches, len(self._store))
        self._events.emit(DrainFinished())
        if self._store.is_empty:
            self._events.emit(QueueEmpty())

    async def _run_one(self, record: TaskRecord) -> None:
        self._events.emit(TaskStarted(record))
        try:
            value = self._worker(record.payload)
            if inspect.isawaitable(value):
                value = await value
        except Exception as exc:
            logger.warning("Task %s failed: %r", record.id, exc)
            self._events.emit(TaskFailed(record, exc))
            if self._config.retry_on_failure:
                new_id = self.submit(record.payload)
                logger.info("Task %s re-submitted as %s", record.id, new_id)
        else:
            self._events.emit(TaskSucceeded(record, value))
        finally:
            self._store.remove(record.id)
