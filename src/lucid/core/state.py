# src/lucid/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..focus.engine import FocusCycleEngine
from ..sync.calendar_sync import CalendarSync
from ..tasks.task_store import TaskStore
from .intake import TaskIntake
from .ports import LLMClient


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    llm: LLMClient
    tasks: TaskStore
    focus: FocusCycleEngine
    intake: TaskIntake
    calendar: CalendarSync

    # Shared by the console loop and the focus ticker thread.
    lock: threading.RLock = field(default_factory=threading.RLock)
