# tests/conftest.py

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from lucid.cli.bootstrap import create_initial_state
from lucid.core.state import AppState
from lucid.focus.engine import FocusCycleEngine, FocusSettings
from lucid.tasks.task_models import Category, Priority, TaskRecord
from lucid.tasks.task_store import TaskStore

from .fakes import FakeCalendarSource, FakeLLMClient


def make_record(
    name: str = "Write report",
    *,
    date_text: str = "July 26, 2024",
    time_text: str | None = "3:00 PM",
    category: Category = Category.WORK,
    priority: Priority = Priority.MEDIUM,
) -> TaskRecord:
    return TaskRecord(
        name=name,
        date_text=date_text,
        time_text=time_text,
        category=category,
        priority=priority,
    )


CANDIDATE_JSON = json.dumps(
    {
        "taskName": "Meeting with Jake",
        "date": "July 25, 2024",
        "time": "3:00 PM",
        "category": "Work",
        "priority": "High",
    }
)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="lucid-test",
        data_dir=tmp_path / "data",
        llm_models=["test/model"],
        focus_work_minutes=25,
        focus_short_break_minutes=5,
        focus_long_break_minutes=15,
        focus_cycles=4,
        tick_interval_seconds=1.0,
        calendar_user="tester@example.com",
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def engine(store: TaskStore) -> FocusCycleEngine:
    """Engine wired to the store both ways, as bootstrap does it."""
    eng = FocusCycleEngine(FocusSettings(), tasks=store)
    store.focus = eng
    return eng


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient(CANDIDATE_JSON)


@pytest.fixture()
def calendar_source() -> FakeCalendarSource:
    return FakeCalendarSource(
        [
            make_record("Team Standup", time_text="10:00 AM"),
            make_record("Design Review", time_text="2:30 PM", priority=Priority.HIGH),
        ]
    )


@pytest.fixture()
def state(settings: SimpleNamespace, llm: FakeLLMClient, calendar_source: FakeCalendarSource) -> AppState:
    return create_initial_state(settings=settings, llm=llm, calendar_source=calendar_source)
