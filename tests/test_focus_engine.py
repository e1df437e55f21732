# tests/test_focus_engine.py

from __future__ import annotations

import pytest

from lucid.focus.engine import (
    ConflictError,
    FocusCycleEngine,
    FocusMode,
    FocusSettings,
    format_time,
)
from lucid.tasks.task_store import TaskStore

from .conftest import make_record


def _run_out(eng: FocusCycleEngine) -> None:
    """Tick until the current interval ends (exactly time_left ticks)."""
    st = eng.state
    assert st is not None
    for _ in range(st.time_left):
        eng.tick()


def test_start_creates_fresh_work_interval() -> None:
    eng = FocusCycleEngine(FocusSettings(work=25))
    st = eng.start(7)

    assert st is not None
    assert st.task_id == 7
    assert st.mode is FocusMode.WORK
    assert st.time_left == 25 * 60
    assert st.cycle_count == 0
    assert st.is_paused is False
    assert eng.attached_task_id == 7


def test_start_for_other_task_conflicts_and_keeps_timer() -> None:
    eng = FocusCycleEngine()
    eng.start(1)
    eng.tick()
    before = eng.state

    with pytest.raises(ConflictError) as exc:
        eng.start(2)

    assert exc.value.active_task_id == 1
    assert exc.value.requested_task_id == 2
    assert eng.state == before


def test_tick_counts_down_then_transitions_without_going_negative() -> None:
    eng = FocusCycleEngine(FocusSettings(work=1, short_break=2))
    eng.start(1)

    for _ in range(59):
        st = eng.tick()
    assert st is not None and st.mode is FocusMode.WORK and st.time_left == 1

    st = eng.tick()
    assert st is not None
    assert st.mode is FocusMode.SHORT_BREAK
    assert st.time_left == 2 * 60
    assert st.cycle_count == 1


def test_default_scenario_fourth_work_completion_is_long_break() -> None:
    eng = FocusCycleEngine(FocusSettings(work=25, short_break=5, long_break=15, cycles=4))
    eng.start(1)

    breaks: list[FocusMode] = []
    for _ in range(4):
        _run_out(eng)  # work
        st = eng.state
        assert st is not None
        breaks.append(st.mode)
        if len(breaks) < 4:
            _run_out(eng)  # break

    st = eng.state
    assert breaks == [FocusMode.SHORT_BREAK] * 3 + [FocusMode.LONG_BREAK]
    assert st is not None
    assert st.cycle_count == 4
    assert st.time_left == 15 * 60


@pytest.mark.parametrize("cycles", [1, 2, 3, 5])
def test_long_break_exactly_every_n_work_intervals(cycles: int) -> None:
    eng = FocusCycleEngine(FocusSettings(cycles=cycles))
    eng.start(1)

    last_count = 0
    for _ in range(3 * cycles * 2):
        before = eng.state
        after = eng.skip()
        assert before is not None and after is not None

        assert after.cycle_count >= last_count
        last_count = after.cycle_count

        if before.mode is FocusMode.WORK:
            assert after.cycle_count == before.cycle_count + 1
            expected = FocusMode.LONG_BREAK if after.cycle_count % cycles == 0 else FocusMode.SHORT_BREAK
            assert after.mode is expected
        else:
            assert after.mode is FocusMode.WORK
            assert after.cycle_count == before.cycle_count


def test_pause_stops_ticks_and_transition_clears_it() -> None:
    eng = FocusCycleEngine()
    eng.start(1)
    eng.tick()

    paused = eng.pause_resume()
    assert paused is not None and paused.is_paused
    assert eng.tick() == paused

    skipped = eng.skip()
    assert skipped is not None
    assert skipped.mode is FocusMode.SHORT_BREAK
    assert skipped.is_paused is False

    first = eng.pause_resume()
    second = eng.pause_resume()
    assert first is not None and first.is_paused is True
    assert second is not None and second.is_paused is False


def test_operations_without_timer_are_noops() -> None:
    eng = FocusCycleEngine()
    assert eng.tick() is None
    assert eng.pause_resume() is None
    assert eng.skip() is None
    eng.reset()
    assert eng.state is None


@pytest.mark.parametrize("skips", [0, 1, 2, 5])
def test_reset_from_any_state_and_restart(skips: int) -> None:
    eng = FocusCycleEngine()
    eng.start(1)
    for _ in range(skips):
        eng.skip()
    eng.pause_resume()

    eng.reset()
    assert eng.state is None
    assert eng.attached_task_id is None

    st = eng.start(2)
    assert st is not None and st.task_id == 2 and st.cycle_count == 0


def test_config_change_applies_at_next_transition() -> None:
    eng = FocusCycleEngine(FocusSettings(work=25, short_break=5))
    eng.start(1)

    assert eng.settings.update("work", "10")
    assert eng.settings.update("shortBreak", 3)

    st = eng.state
    assert st is not None and st.time_left == 25 * 60

    st = eng.skip()
    assert st is not None and st.time_left == 3 * 60
    st = eng.skip()
    assert st is not None and st.time_left == 10 * 60


@pytest.mark.parametrize("raw", ["0", "-3", "abc", "", None, "2.5", 0, -1, True])
def test_settings_reject_bad_values(raw: object) -> None:
    cfg = FocusSettings()
    assert cfg.update("work", raw) is False
    assert cfg.work == 25


def test_settings_aliases_and_unknown_field() -> None:
    cfg = FocusSettings()
    assert cfg.update("longBreak", "20")
    assert cfg.update("cyclesPerLongBreak", " 6 ")
    assert cfg.update("short_break", 7)
    assert cfg.update("coffee", "3") is False

    assert (cfg.work, cfg.short_break, cfg.long_break, cfg.cycles) == (25, 7, 20, 6)


def test_start_ignores_unknown_or_completed_task() -> None:
    store = TaskStore()
    eng = FocusCycleEngine(tasks=store)
    store.focus = eng
    task_id = store.add(make_record())

    assert eng.start(999) is None
    store.toggle_status(task_id)
    assert eng.start(task_id) is None
    assert eng.state is None

    store.toggle_status(task_id)
    st = eng.start(task_id)
    assert st is not None and st.task_id == task_id


def test_format_time_and_labels() -> None:
    assert format_time(25 * 60) == "25:00"
    assert format_time(65) == "01:05"
    assert format_time(-4) == "00:00"
    assert FocusMode.SHORT_BREAK.label == "Short Break"
