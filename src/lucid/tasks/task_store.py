# src/lucid/tasks/task_store.py

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from ..core.ports import FocusTimer
from .datetime_reconciler import from_timestamp, to_timestamp
from .task_models import CalendarEvent, Task, TaskOrigin, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task store (process lifetime only).

    Ordering:
    - tasks are kept in insertion order; every listing is derived from it
    - ids come from a monotonic counter and are never reused, across origins

    Focus coupling:
    - if a focus timer is wired in (`focus`), completing or removing the task it
      is attached to resets it

    Reads return copies; mutate only through the methods below.
    """

    def __init__(self, *, focus: FocusTimer | None = None) -> None:
        self.focus = focus
        self._tasks: dict[int, Task] = {}
        self._ids = itertools.count(1)
        logger.info("TaskStore ready (in-memory)")

    # ---- low-level helpers ----

    def _insert(self, record: TaskRecord, origin: TaskOrigin) -> int:
        name = (record.name or "").strip()
        if not name:
            raise ValueError("task name is required")

        task_id = next(self._ids)
        self._tasks[task_id] = Task(
            id=task_id,
            name=name,
            date_text=(record.date_text or "").strip(),
            time_text=(record.time_text or "").strip() or None,
            category=record.category,
            priority=record.priority,
            status=TaskStatus.ACTIVE,
            origin=origin,
        )
        logger.debug(
            "Task added id=%s origin=%s priority=%s date=%r time=%r",
            task_id,
            origin.value,
            record.priority.value,
            record.date_text,
            record.time_text,
        )
        return task_id

    def _release_focus(self, task_id: int) -> None:
        focus = self.focus
        if focus is not None and focus.attached_task_id == task_id:
            logger.info("Focus cycle detached from task %s", task_id)
            focus.reset()

    def _drop_external(self) -> int:
        doomed = [t.id for t in self._tasks.values() if t.origin is TaskOrigin.EXTERNAL]
        for task_id in doomed:
            self._release_focus(task_id)
            del self._tasks[task_id]
        return len(doomed)

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        t = self._tasks.get(task_id)
        return replace(t) if t is not None else None

    def is_active(self, task_id: int) -> bool:
        t = self._tasks.get(task_id)
        return t is not None and t.is_active

    def all_tasks(self) -> list[Task]:
        return [replace(t) for t in self._tasks.values()]

    def add(self, record: TaskRecord) -> int:
        """Insert an accepted candidate as an active local task; returns its new id."""
        return self._insert(record, TaskOrigin.LOCAL)

    def replace_external(self, records: Iterable[TaskRecord]) -> list[int]:
        """
        Swap the whole external batch.

        All current external tasks are removed first (tearing down an attached
        focus cycle), then each record is inserted with a fresh id.
        Local tasks are untouched. Records without a name are skipped.
        """
        removed = self._drop_external()
        ids: list[int] = []
        for rec in records:
            try:
                ids.append(self._insert(rec, TaskOrigin.EXTERNAL))
            except ValueError:
                logger.warning("Skipping external record without a name: %r", rec)
        logger.info("External tasks replaced: removed=%d inserted=%d", removed, len(ids))
        return ids

    def remove_all_external(self) -> int:
        removed = self._drop_external()
        logger.info("External tasks removed: %d", removed)
        return removed

    def toggle_status(self, task_id: int) -> Task | None:
        """Flip active <-> completed. Unknown id is a no-op (returns None)."""
        t = self._tasks.get(task_id)
        if t is None:
            logger.debug("toggle_status: unknown task id=%s", task_id)
            return None

        t.status = t.status.toggled()
        self._release_focus(task_id)
        logger.info("Task %s -> %s", task_id, t.status.value)
        return replace(t)

    def active_tasks_by_priority(self) -> list[Task]:
        # sorted() is stable, so equal priorities keep insertion order.
        active = [t for t in self._tasks.values() if t.is_active]
        return [replace(t) for t in sorted(active, key=lambda t: t.priority.rank)]

    def completed_tasks(self) -> list[Task]:
        return [replace(t) for t in self._tasks.values() if not t.is_active]

    def apply_calendar_move(self, task_id: int, new_start: datetime, is_all_day: bool) -> Task | None:
        """Re-derive date/time text after a calendar drag. Unknown id is a no-op."""
        t = self._tasks.get(task_id)
        if t is None:
            logger.debug("apply_calendar_move: unknown task id=%s", task_id)
            return None

        t.date_text, t.time_text = from_timestamp(new_start, is_all_day)
        logger.info("Task %s moved to %s %s", task_id, t.date_text, t.time_text or "(all day)")
        return replace(t)

    def calendar_events(self) -> list[CalendarEvent]:
        """
        Calendar projection of active tasks.

        Tasks whose date/time text does not parse are left out here but stay
        in the list views.
        """
        events: list[CalendarEvent] = []
        for t in self._tasks.values():
            if not t.is_active:
                continue
            start = to_timestamp(t.date_text, t.time_text)
            if start is None:
                continue
            css = [f"category-{t.category.value.lower()}"]
            if t.origin is TaskOrigin.EXTERNAL:
                css.append("google-event")
            css.append(f"priority-{t.priority.value.lower()}")
            events.append(
                CalendarEvent(
                    task_id=t.id,
                    title=t.name,
                    start=start,
                    all_day=t.is_all_day,
                    css_class=" ".join(css),
                )
            )
        return events
