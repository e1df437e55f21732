# src/lucid/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the LLM provider and the calendar source swappable and makes testing easier.
"""

from typing import Iterable, Protocol

from ..tasks.task_models import TaskRecord

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class TaskLookup(Protocol):
    """What the focus engine needs to know about tasks: only whether an id is startable."""
    def is_active(self, task_id: int) -> bool: ...


class FocusTimer(Protocol):
    """
    What the task store needs from the focus engine.

    Completing or removing a task must tear down a cycle attached to it.
    """

    @property
    def attached_task_id(self) -> int | None: ...

    def reset(self) -> None: ...


class CalendarSource(Protocol):
    """External calendar feed. Each call returns the full current batch."""
    def fetch_events(self) -> list[TaskRecord]: ...
