# src/lucid/focus/engine.py

"""
Focus-cycle (pomodoro) state machine.

One engine drives at most one countdown, attached to one task:

    absent --start--> work --(timeout|skip)--> shortBreak | longBreak --(timeout|skip)--> work ...
    any state --reset--> absent

Key invariants:
- cycle_count increments only on work -> break, never on break -> work,
- every `cycles`-th completed work interval is followed by a long break,
- every transition clears the pause flag,
- configuration changes apply at the next transition, not to the running countdown.

The engine does no timing of its own: whoever owns it calls tick() once per
elapsed second (see focus/ticker.py). Every operation returns the resulting
state snapshot (None = no active timer).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import StrEnum

from ..core.ports import TaskLookup

logger = logging.getLogger(__name__)


class ConflictError(RuntimeError):
    """Raised when starting a timer while another task already owns the running one."""

    def __init__(self, active_task_id: int, requested_task_id: int) -> None:
        super().__init__(
            f"A focus timer is already running for task {active_task_id}; "
            f"reset it before starting task {requested_task_id}."
        )
        self.active_task_id = active_task_id
        self.requested_task_id = requested_task_id


class FocusMode(StrEnum):
    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_LABELS: dict[FocusMode, str] = {
    FocusMode.WORK: "Work",
    FocusMode.SHORT_BREAK: "Short Break",
    FocusMode.LONG_BREAK: "Long Break",
}

# Accepted spellings for FocusSettings.update() -> attribute name.
_FIELD_ALIASES: dict[str, str] = {
    "work": "work",
    "shortbreak": "short_break",
    "short_break": "short_break",
    "short": "short_break",
    "longbreak": "long_break",
    "long_break": "long_break",
    "long": "long_break",
    "cycles": "cycles",
    "cyclesperlongbreak": "cycles",
    "cycles_per_long_break": "cycles",
}


def _positive_int(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    s = str(raw if raw is not None else "").strip()
    try:
        value = int(s)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(slots=True)
class FocusSettings:
    """Durations in minutes; `cycles` = work intervals per long break."""

    work: int = 25
    short_break: int = 5
    long_break: int = 15
    cycles: int = 4

    def update(self, field: str, raw_value: object) -> bool:
        """
        Set one option from untrusted input (settings form, CLI).

        Non-numeric, zero, negative values and unknown fields are ignored and
        the previous value is kept. Returns True if the value was applied.
        """
        attr = _FIELD_ALIASES.get(str(field or "").strip().lower())
        value = _positive_int(raw_value)
        if attr is None or value is None:
            logger.debug("Ignoring focus setting %r=%r", field, raw_value)
            return False
        setattr(self, attr, value)
        logger.info("Focus setting %s=%s", attr, value)
        return True

    def seconds_for(self, mode: FocusMode) -> int:
        if mode is FocusMode.WORK:
            return self.work * 60
        if mode is FocusMode.SHORT_BREAK:
            return self.short_break * 60
        return self.long_break * 60


@dataclass(slots=True, frozen=True)
class FocusState:
    task_id: int
    time_left: int
    mode: FocusMode
    cycle_count: int
    is_paused: bool


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


class FocusCycleEngine:
    def __init__(self, settings: FocusSettings | None = None, *, tasks: TaskLookup | None = None) -> None:
        self.settings = settings if settings is not None else FocusSettings()
        self._tasks = tasks
        self._state: FocusState | None = None

    @property
    def state(self) -> FocusState | None:
        return self._state

    @property
    def attached_task_id(self) -> int | None:
        return self._state.task_id if self._state is not None else None

    def start(self, task_id: int) -> FocusState | None:
        """
        Attach a fresh work countdown to task_id.

        Raises ConflictError if a different task owns the running timer.
        If a task lookup is wired in, unknown or completed tasks are ignored (returns None).
        """
        current = self._state
        if current is not None and current.task_id != task_id:
            raise ConflictError(current.task_id, task_id)

        if self._tasks is not None and not self._tasks.is_active(task_id):
            logger.info("Focus start ignored: task %s is not active", task_id)
            return None

        self._state = FocusState(
            task_id=task_id,
            time_left=self.settings.seconds_for(FocusMode.WORK),
            mode=FocusMode.WORK,
            cycle_count=0,
            is_paused=False,
        )
        logger.info("Focus started task=%s work=%smin", task_id, self.settings.work)
        return self._state

    def tick(self) -> FocusState | None:
        st = self._state
        if st is None or st.is_paused:
            return st

        if st.time_left > 1:
            self._state = replace(st, time_left=st.time_left - 1)
            return self._state

        return self._transition(st)

    def pause_resume(self) -> FocusState | None:
        st = self._state
        if st is None:
            return None
        self._state = replace(st, is_paused=not st.is_paused)
        logger.debug("Focus %s task=%s", "paused" if self._state.is_paused else "resumed", st.task_id)
        return self._state

    def skip(self) -> FocusState | None:
        st = self._state
        if st is None:
            return None
        return self._transition(st)

    def reset(self) -> None:
        if self._state is not None:
            logger.info("Focus reset task=%s", self._state.task_id)
        self._state = None

    def _transition(self, st: FocusState) -> FocusState:
        cfg = self.settings

        if st.mode is FocusMode.WORK:
            cycle_count = st.cycle_count + 1
            mode = FocusMode.LONG_BREAK if cycle_count % cfg.cycles == 0 else FocusMode.SHORT_BREAK
        else:
            cycle_count = st.cycle_count
            mode = FocusMode.WORK

        self._state = FocusState(
            task_id=st.task_id,
            time_left=cfg.seconds_for(mode),
            mode=mode,
            cycle_count=cycle_count,
            is_paused=False,
        )
        logger.info(
            "Focus task=%s %s -> %s (cycles=%s)",
            st.task_id,
            st.mode.value,
            mode.value,
            cycle_count,
        )
        return self._state
