# src/lucid/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (LLM/tasks/focus/calendar).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.intake import TaskIntake
from ..core.ports import CalendarSource, LLMClient
from ..core.state import AppState
from ..focus.engine import FocusCycleEngine, FocusSettings
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..sync.calendar_sync import CalendarSync, DemoCalendarSource
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def focus_settings_from(settings) -> FocusSettings:
    return FocusSettings(
        work=int(getattr(settings, "focus_work_minutes", 25)),
        short_break=int(getattr(settings, "focus_short_break_minutes", 5)),
        long_break=int(getattr(settings, "focus_long_break_minutes", 15)),
        cycles=int(getattr(settings, "focus_cycles", 4)),
    )


def create_initial_state(
    *,
    settings=None,
    llm: LLMClient | None = None,
    calendar_source: CalendarSource | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and collaborators) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)

    if llm is None:
        try:
            llm = OpenRouterLLMClient(settings)
        except RuntimeError as e:
            # Fallback for demos / local runs without external services.
            logger.info("LLM unavailable (%s); using offline parser.", e)
            llm = OfflineLLMClient()

    store = TaskStore()
    focus = FocusCycleEngine(focus_settings_from(settings), tasks=store)
    store.focus = focus

    return AppState(
        settings=settings,
        llm=llm,
        tasks=store,
        focus=focus,
        intake=TaskIntake(llm, store),
        calendar=CalendarSync(store, calendar_source or DemoCalendarSource()),
    )
