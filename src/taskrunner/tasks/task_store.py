# src/taskrunner/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from .task_models import TaskRecord

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory FIFO store of pending task records.

    - ids are assigned here, strictly increasing from 0, never reused
    - order is insertion order only; a re-added payload goes to the tail with a new id
    - a record is present at most once; removal is by id

    The store is owned by exactly one runner and is not thread-safe.
    """

    def __init__(self) -> None:
        self._records: list[TaskRecord] = []
        self._next_id = 0

    # ---- queries ----

    @property
    def is_empty(self) -> bool:
        return not self._records

    @property
    def next_id(self) -> int:
        """Id the next added record will receive."""
        return self._next_id

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TaskRecord]:
        return iter(list(self._records))

    def __contains__(self, task_id: object) -> bool:
        return any(r.id == task_id for r in self._records)

    def head(self, limit: int) -> list[TaskRecord]:
        """Snapshot of up to `limit` records from the head of the queue."""
        if limit <= 0:
            return []
        return self._records[:limit]

    # ---- mutations ----

    def add(self, payload: Any) -> TaskRecord:
        record = TaskRecord(id=self._next_id, payload=payload)
        self._next_id += 1
        self._records.append(record)
        logger.debug("Task added id=%s pending=%s", record.id, len(self._records))
        return record

    def remove(self, task_id: int) -> None:
        for idx, record in enumerate(self._records):
            if record.id == task_id:
                del self._records[idx]
                logger.debug("Task removed id=%s pending=%s", task_id, len(self._records))
                return

    def clear(self) -> list[TaskRecord]:
        """Drop every record; returns the dropped records in queue order."""
        dropped, self._records = self._records, []
        if dropped:
            logger.debug("Store cleared, dropped=%s", len(dropped))
        return dropped
