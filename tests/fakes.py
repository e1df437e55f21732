# tests/fakes.py

from __future__ import annotations

import time
from collections.abc import Iterable

from lucid.core.ports import ChatMessage
from lucid.tasks.task_models import TaskRecord


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions
    - Yields a predefined text as a single chunk, or raises `error` if set
    - Sleeps `delay` seconds first, like a slow model would
    """

    def __init__(self, next_text: str = "{}", error: Exception | None = None, delay: float = 0.0) -> None:
        self.next_text = next_text
        self.error = error
        self.delay = delay
        self.calls: list[tuple[list[ChatMessage], str]] = []

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls.append((messages, system_prompt))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        yield self.next_text


class FakeCalendarSource:
    """Returns the queued batches one per fetch; repeats the last one when exhausted."""

    def __init__(self, *batches: list[TaskRecord]) -> None:
        self.batches = list(batches) or [[]]
        self.fetches = 0

    def fetch_events(self) -> list[TaskRecord]:
        i = min(self.fetches, len(self.batches) - 1)
        self.fetches += 1
        return list(self.batches[i])
