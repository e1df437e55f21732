# src/lucid/llm/offline.py

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from datetime import date, timedelta

from ..core.ports import ChatMessage
from ..tasks.datetime_reconciler import format_date

_TIME_RE = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*([ap])\.?m\.?\b", re.IGNORECASE)

_CATEGORY_HINTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Work", ("meeting", "standup", "client", "report", "deadline", "email", "review")),
    ("Study", ("study", "exam", "homework", "lecture", "read chapter", "course")),
    ("Health", ("gym", "doctor", "run", "workout", "dentist", "yoga")),
    ("Personal", ("mom", "dad", "birthday", "groceries", "dinner", "call")),
)


def _guess_category(text: str) -> str:
    low = text.lower()
    for name, words in _CATEGORY_HINTS:
        if any(w in low for w in words):
            return name
    return "Other"


def _guess_priority(text: str) -> str:
    low = text.lower()
    if any(w in low for w in ("urgent", "asap", "immediately", "critical")):
        return "High"
    if any(w in low for w in ("someday", "whenever", "low priority", "eventually")):
        return "Low"
    return "Medium"


def _guess_time(text: str) -> str | None:
    m = _TIME_RE.search(text)
    if not m:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    if not (1 <= hour <= 12 and 0 <= minute <= 59):
        return None
    return f"{hour}:{minute:02d} {m.group(3).upper()}M"


def _guess_date(text: str, today: date) -> str:
    day = today + timedelta(days=1) if "tomorrow" in text.lower() else today
    return format_date(day)


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Behavior:
    - Task parsing prompts -> a keyword-heuristic JSON candidate (today/tomorrow,
      "3 PM"-style times, urgent/asap => High)
    - Anything else -> a short notice that no LLM is configured
    """

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        sp = (system_prompt or "").lower()

        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        if "scheduling assistant" in sp:
            today = self._today or date.today()
            yield json.dumps(
                {
                    "taskName": user_text.strip(),
                    "date": _guess_date(user_text, today),
                    "time": _guess_time(user_text),
                    "category": _guess_category(user_text),
                    "priority": _guess_priority(user_text),
                }
            )
            return

        yield (
            "Offline demo mode: no external LLM is configured.\n"
            "Set LUCID_LLM_API_KEY (and LUCID_LLM_MODELS) to enable real responses."
        )
