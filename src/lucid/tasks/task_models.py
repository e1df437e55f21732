# src/lucid/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TaskStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"

    def toggled(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self is TaskStatus.ACTIVE else TaskStatus.ACTIVE


class TaskOrigin(StrEnum):
    """
    Who owns the task lifecycle.

    - local: accepted by the user from a parsed candidate
    - external: produced by calendar sync; bulk-replaced on every resync
    """

    LOCAL = "local"
    EXTERNAL = "external"


class Category(StrEnum):
    WORK = "Work"
    PERSONAL = "Personal"
    STUDY = "Study"
    HEALTH = "Health"
    OTHER = "Other"

    @classmethod
    def parse(cls, raw: object) -> Category | None:
        s = str(raw or "").strip().lower()
        for c in cls:
            if c.value.lower() == s:
                return c
        return None


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: object) -> Priority | None:
        s = str(raw or "").strip().lower()
        for p in cls:
            if p.value.lower() == s:
                return p
        return None


# Sort key for priority ordering (lower sorts first).
_PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """
    Unstored task payload.

    Used both for parsed candidates awaiting acceptance and for batches
    coming from calendar sync. `time_text=None` means an all-day task.
    """

    name: str
    date_text: str
    time_text: str | None = None
    category: Category = Category.OTHER
    priority: Priority = Priority.MEDIUM


@dataclass(slots=True)
class Task:
    id: int
    name: str
    date_text: str
    time_text: str | None
    category: Category
    priority: Priority
    status: TaskStatus
    origin: TaskOrigin

    @property
    def is_active(self) -> bool:
        return self.status is TaskStatus.ACTIVE

    @property
    def is_all_day(self) -> bool:
        return not self.time_text


@dataclass(slots=True, frozen=True)
class CalendarEvent:
    """Calendar-facing projection of an active task."""

    task_id: int
    title: str
    start: datetime
    all_day: bool
    css_class: str
