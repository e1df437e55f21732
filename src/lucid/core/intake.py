# src/lucid/core/intake.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from ..parsing.task_parser import TaskParseError, parse_task
from ..tasks.task_models import Category, Priority, TaskRecord
from ..tasks.task_store import TaskStore
from .ports import LLMClient

logger = logging.getLogger(__name__)

# edit() field names (original camelCase and snake_case) -> TaskRecord attribute.
_EDIT_FIELDS: dict[str, str] = {
    "taskname": "name",
    "task_name": "name",
    "name": "name",
    "task": "name",
    "date": "date_text",
    "time": "time_text",
    "category": "category",
    "priority": "priority",
}


class TaskIntake:
    """
    Candidate review workflow.

    submit() -> (optional edit()/save_edit()) -> accept() | cancel()

    At most one candidate is pending. It reaches the TaskStore only through
    accept(); a failed submit leaves no candidate behind.
    """

    def __init__(self, llm: LLMClient, store: TaskStore) -> None:
        self.llm = llm
        self.store = store
        self.candidate: TaskRecord | None = None
        self.draft: TaskRecord | None = None

    def submit(self, text: str, *, today: date | None = None) -> TaskRecord | None:
        """Parse free text into a new candidate. Blank text is ignored (returns None)."""
        if not (text or "").strip():
            return None

        self.candidate = None
        self.draft = None
        try:
            record = parse_task(self.llm, text.strip(), today=today)
        except TaskParseError:
            logger.info("Task submit failed for text=%r", text[:200])
            raise

        self.candidate = record
        self.draft = record
        return record

    def edit(self, field: str, value: str) -> TaskRecord | None:
        """
        Change one field of the draft.

        Unknown fields, blank names/dates and invalid category/priority are
        ignored. A blank time makes the task all-day.
        """
        if self.draft is None:
            return None

        attr = _EDIT_FIELDS.get(str(field or "").strip().lower())
        if attr is None:
            logger.debug("Ignoring edit of unknown field %r", field)
            return self.draft

        text = str(value or "").strip()
        if attr == "category":
            category = Category.parse(text)
            if category is not None:
                self.draft = replace(self.draft, category=category)
        elif attr == "priority":
            priority = Priority.parse(text)
            if priority is not None:
                self.draft = replace(self.draft, priority=priority)
        elif attr == "time_text":
            self.draft = replace(self.draft, time_text=text or None)
        elif text:
            self.draft = replace(self.draft, **{attr: text})
        return self.draft

    def save_edit(self) -> TaskRecord | None:
        if self.draft is not None:
            self.candidate = self.draft
        return self.candidate

    def discard_edit(self) -> TaskRecord | None:
        self.draft = self.candidate
        return self.draft

    def accept(self) -> int | None:
        """Commit the candidate as a local task; returns the new task id."""
        if self.candidate is None:
            return None
        task_id = self.store.add(self.candidate)
        logger.info("Candidate accepted as task %s", task_id)
        self.candidate = None
        self.draft = None
        return task_id

    def cancel(self) -> None:
        self.candidate = None
        self.draft = None
