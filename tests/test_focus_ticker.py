# tests/test_focus_ticker.py

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from lucid.focus.engine import FocusCycleEngine, FocusMode, FocusSettings, FocusState
from lucid.focus.ticker import run_focus_ticker, start_ticker_in_background


@pytest.mark.asyncio
async def test_ticker_drives_engine_through_transition() -> None:
    eng = FocusCycleEngine(FocusSettings(work=1))
    eng.start(1)

    seen: list[tuple[FocusMode, FocusMode]] = []
    done = asyncio.Event()

    def on_transition(prev: FocusState | None, cur: FocusState) -> None:
        assert prev is not None
        seen.append((prev.mode, cur.mode))
        done.set()

    stop = asyncio.Event()
    runner = asyncio.create_task(
        run_focus_ticker(
            eng,
            lock=threading.Lock(),
            interval_seconds=0.0001,
            on_transition=on_transition,
            stop_event=stop,
        )
    )

    await asyncio.wait_for(done.wait(), timeout=10.0)
    stop.set()
    await asyncio.wait_for(runner, timeout=5.0)

    assert seen[0] == (FocusMode.WORK, FocusMode.SHORT_BREAK)
    st = eng.state
    assert st is not None and st.cycle_count == 1


@pytest.mark.asyncio
async def test_ticker_leaves_paused_timer_alone() -> None:
    eng = FocusCycleEngine()
    eng.start(1)
    paused = eng.pause_resume()

    runner = asyncio.create_task(run_focus_ticker(eng, interval_seconds=0.001))
    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert eng.state == paused


def test_background_runner_ticks_and_stops() -> None:
    eng = FocusCycleEngine()
    eng.start(1)
    lock = threading.RLock()

    runner = start_ticker_in_background(eng, lock=lock, interval_seconds=0.001)
    assert runner is not None

    deadline = time.monotonic() + 5.0
    while time.monotonic() < deadline:
        with lock:
            st = eng.state
        if st is not None and st.time_left < 25 * 60:
            break
        time.sleep(0.01)

    runner.stop()
    runner.join(timeout=5.0)

    assert not runner.thread.is_alive()
    st = eng.state
    assert st is not None and st.time_left < 25 * 60
