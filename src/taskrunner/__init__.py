"""
Bounded-concurrency, batch-parallel task runner for asyncio.

Quick use:

    runner = TaskRunner(worker, concurrency=4, inter_batch_delay_ms=0)
    runner.submit(payload)
"""

from .config import RunnerConfig
from .tasks.task_models import EventKind, LoopState, RunnerEvent, RunnerState, TaskRecord
from .tasks.task_runner import TaskRunner

__all__ = [
    "EventKind",
    "LoopState",
    "RunnerConfig",
    "RunnerEvent",
    "RunnerState",
    "TaskRecord",
    "TaskRunner",
]
