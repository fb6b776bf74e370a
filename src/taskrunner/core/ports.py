# src/taskrunner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the runner.

The runner depends on Protocols instead of concrete callables.
Any async function taking one payload is a Worker; any callable taking one
event is an EventListener.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import RunnerEvent


class Worker(Protocol):
    """
    Caller-supplied work function.

    Returning an awaitable is the normal case; a plain return value is accepted
    and treated as an already-resolved outcome. Raising (or an awaitable that
    raises) marks the task as failed.
    """

    def __call__(self, payload: Any) -> Awaitable[Any] | Any: ...


class EventListener(Protocol):
    """Notification callback. Called synchronously; must not block."""

    def __call__(self, event: RunnerEvent) -> None: ...
