# src/lucid/sync/calendar_sync.py

from __future__ import annotations

import logging
from datetime import date, timedelta

from ..core.ports import CalendarSource
from ..tasks.datetime_reconciler import format_date
from ..tasks.task_models import Category, Priority, TaskRecord
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


class DemoCalendarSource:
    """Stand-in calendar feed: a standup today and a design review tomorrow."""

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def fetch_events(self) -> list[TaskRecord]:
        today = self._today or date.today()
        tomorrow = today + timedelta(days=1)
        return [
            TaskRecord(
                name="Team Standup",
                date_text=format_date(today),
                time_text="10:00 AM",
                category=Category.WORK,
                priority=Priority.MEDIUM,
            ),
            TaskRecord(
                name="Design Review",
                date_text=format_date(tomorrow),
                time_text="2:30 PM",
                category=Category.WORK,
                priority=Priority.HIGH,
            ),
        ]


class CalendarSync:
    """
    Connection state for the external calendar.

    The TaskStore's replace_external() is the only way synced records get in;
    disconnect() removes every external task.
    """

    def __init__(self, store: TaskStore, source: CalendarSource) -> None:
        self.store = store
        self.source = source
        self.user: str | None = None

    @property
    def connected(self) -> bool:
        return self.user is not None

    def connect(self, user: str) -> None:
        self.user = (user or "").strip() or "user@example.com"
        logger.info("Calendar connected as %s", self.user)

    def sync_now(self) -> int:
        """Fetch and replace the external batch; returns how many tasks were inserted."""
        if not self.connected:
            logger.info("Calendar sync skipped: not connected")
            return 0
        records = self.source.fetch_events()
        return len(self.store.replace_external(records))

    def disconnect(self) -> int:
        """Forget the account and drop all external tasks; returns how many were removed."""
        self.user = None
        removed = self.store.remove_all_external()
        logger.info("Calendar disconnected")
        return removed
