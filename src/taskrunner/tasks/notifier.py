# src/taskrunner/tasks/notifier.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..core.ports import EventListener
from .task_models import EventKind, RunnerEvent

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class _Subscription:
    listener: EventListener
    kinds: frozenset[EventKind]
    once: bool = False

    def matches(self, event: RunnerEvent) -> bool:
        return not self.kinds or event.kind in self.kinds


class Notifier:
    """
    Synchronous, ordered fan-out of runner events.

    Listeners are called in subscription order, in the order events are emitted.
    A failing listener is logged and skipped; it never breaks delivery or the runner.
    """

    def __init__(self) -> None:
        self._subs: list[_Subscription] = []

    def __len__(self) -> int:
        return len(self._subs)

    def subscribe(self, listener: EventListener, *kinds: EventKind) -> Callable[[], None]:
        """
        Register `listener` for the given kinds (all kinds when none given).
        Returns a callable that removes this subscription.
        """
        sub = _Subscription(listener=listener, kinds=frozenset(kinds))
        self._subs.append(sub)

        def _unsubscribe() -> None:
            if sub in self._subs:
                self._subs.remove(sub)

        return _unsubscribe

    def once(self, kind: EventKind, listener: EventListener) -> None:
        self._subs.append(_Subscription(listener=listener, kinds=frozenset((kind,)), once=True))

    def unsubscribe(self, listener: EventListener) -> None:
        self._subs = [s for s in self._subs if s.listener is not listener]

    def emit(self, event: RunnerEvent) -> None:
        logger.debug("event %s %s", event.kind.value, event)

        for sub in list(self._subs):
            if not sub.matches(event):
                continue
            if sub.once and sub in self._subs:
                self._subs.remove(sub)
            try:
                sub.listener(event)
            except Exception:
                logger.exception("Event listener failed kind=%s", event.kind.value)

    def wait_for(
        self,
        kind: EventKind,
        predicate: Callable[[RunnerEvent], bool] | None = None,
    ) -> asyncio.Future[RunnerEvent]:
        """
        Future resolved with the next event of `kind` (and matching `predicate`).

        Must be called with a running event loop. Cancelling the future removes
        the subscription.
        """
        fut: asyncio.Future[RunnerEvent] = asyncio.get_running_loop().create_future()

        def _listener(event: RunnerEvent) -> None:
            if fut.done():
                return
            if predicate is not None and not predicate(event):
                return
            fut.set_result(event)

        unsubscribe = self.subscribe(_listener, kind)
        fut.add_done_callback(lambda _f: unsubscribe())
        return fut
