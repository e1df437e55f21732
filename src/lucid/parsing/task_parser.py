# src/lucid/parsing/task_parser.py

"""
Free text -> candidate task record, via the LLM.

The result is only a candidate: nothing here touches the TaskStore.
Output is normalized rather than trusted:
- unknown category -> Other, unknown priority -> Medium,
- empty / "null" time -> all-day (None).
Missing task name or date, non-JSON output, or any LLM failure raises
TaskParseError with a message that can be shown to the user as is.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

from ..core.ports import LLMClient
from ..tasks.datetime_reconciler import format_date
from ..tasks.task_models import Category, Priority, TaskRecord

logger = logging.getLogger(__name__)

PARSE_FAILED_MESSAGE = "Sorry, I had trouble understanding that. Please try rephrasing your request."


class TaskParseError(RuntimeError):
    def __init__(self, message: str = PARSE_FAILED_MESSAGE) -> None:
        super().__init__(message)


def build_system_prompt(today: date) -> str:
    categories = ", ".join(c.value for c in Category)
    return f"""
You are an intelligent scheduling assistant.
Your role is to parse user input about tasks and events and convert it into a structured JSON format.
Analyze the text to identify the task description, date, time, a relevant category, and its priority.
- Today's date is {format_date(today)}.
- Default to a relevant category if one isn't specified. Valid categories are: {categories}.
- Determine a priority for the task (High, Medium, or Low) based on wording
  (e.g., 'urgent', 'asap' implies High). Default to Medium if unsure.

Return STRICT JSON only. No extra text. No Markdown. Schema:
{{
  "taskName": string,   // the name or description of the task
  "date": string,       // 'Month Day, Year', e.g. 'July 26, 2024'
  "time": string|null,  // 'HH:MM AM/PM'; null if not specified
  "category": string,   // one of: {categories}
  "priority": string    // High | Medium | Low
}}
""".strip()


def _extract_json_object(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("{") and raw.endswith("}"):
        return raw
    first = raw.find("{")
    last = raw.rfind("}")
    if first != -1 and last != -1 and last > first:
        return raw[first : last + 1]
    return raw


def _clean_time(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v).strip()
    if not s or s.lower() in {"null", "none", "n/a", "all day", "all-day"}:
        return None
    return s


def record_from_payload(payload: dict[str, Any]) -> TaskRecord:
    """Normalize a parsed JSON object into a TaskRecord (raises TaskParseError if unusable)."""
    name = str(payload.get("taskName") or payload.get("name") or "").strip()
    date_text = str(payload.get("date") or "").strip()
    if not name or not date_text:
        raise TaskParseError()

    return TaskRecord(
        name=name,
        date_text=date_text,
        time_text=_clean_time(payload.get("time")),
        category=Category.parse(payload.get("category")) or Category.OTHER,
        priority=Priority.parse(payload.get("priority")) or Priority.MEDIUM,
    )


def parse_task(llm: LLMClient, text: str, *, today: date | None = None) -> TaskRecord:
    today = today or date.today()

    raw = ""
    try:
        for piece in llm.stream_chat([{"role": "user", "content": text}], build_system_prompt(today)):
            raw += piece
    except Exception as e:
        logger.exception("Task parsing LLM call failed.")
        raise TaskParseError() from e

    raw = (raw or "").strip()
    if not raw:
        logger.info("Task parsing: empty LLM output.")
        raise TaskParseError()

    try:
        payload = json.loads(_extract_json_object(raw))
    except ValueError as e:
        logger.warning("Task parsing: JSON parse failed. Raw=%r", raw[:2000])
        raise TaskParseError() from e

    if not isinstance(payload, dict):
        logger.warning("Task parsing: expected a JSON object, got %s", type(payload).__name__)
        raise TaskParseError()

    record = record_from_payload(payload)
    logger.debug("Task parsed: %r", record)
    return record
