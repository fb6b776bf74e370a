# src/taskrunner/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar


class RunnerState(StrEnum):
    """
    Run state of a TaskRunner.

    STOPPED is initial. start() moves to RUNNING from either other state;
    pause() only from RUNNING; stop() from RUNNING or PAUSED.
    """

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class LoopState(StrEnum):
    """Re-entrancy guard of the dispatch loop (orthogonal to RunnerState)."""

    IDLE = "idle"
    DRAINING = "draining"


class EventKind(StrEnum):
    STARTED = "started"
    PAUSED = "paused"
    STOPPED = "stopped"
    TASK_ADDED = "task-added"
    TASK_STARTED = "task-started"
    TASK_SUCCEEDED = "task-succeeded"
    TASK_FAILED = "task-failed"
    TASK_DROPPED = "task-dropped"
    DRAIN_FINISHED = "drain-finished"
    QUEUE_EMPTY = "queue-empty"


@dataclass(slots=True, frozen=True)
class TaskRecord:
    id: int
    payload: Any


# ---- events ----


@dataclass(slots=True, frozen=True)
class RunnerEvent:
    """Base class of every notification; `kind` tags the concrete variant."""

    kind: ClassVar[EventKind]


@dataclass(slots=True, frozen=True)
class Started(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.STARTED


@dataclass(slots=True, frozen=True)
class Paused(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.PAUSED


@dataclass(slots=True, frozen=True)
class Stopped(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.STOPPED


@dataclass(slots=True, frozen=True)
class TaskAdded(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.TASK_ADDED

    record: TaskRecord


@dataclass(slots=True, frozen=True)
class TaskStarted(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.TASK_STARTED

    record: TaskRecord


@dataclass(slots=True, frozen=True)
class TaskSucceeded(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.TASK_SUCCEEDED

    record: TaskRecord
    value: Any


@dataclass(slots=True, frozen=True)
class TaskFailed(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.TASK_FAILED

    record: TaskRecord
    error: BaseException


@dataclass(slots=True, frozen=True)
class TaskDropped(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.TASK_DROPPED

    record: TaskRecord


@dataclass(slots=True, frozen=True)
class DrainFinished(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.DRAIN_FINISHED


@dataclass(slots=True, frozen=True)
class QueueEmpty(RunnerEvent):
    kind: ClassVar[EventKind] = EventKind.QUEUE_EMPTY
