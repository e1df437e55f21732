# src/lucid/focus/ticker.py

from __future__ import annotations

"""
Focus ticker.

A small polling loop that:
- calls engine.tick() once per interval while a timer exists and is not paused,
- holds the shared state lock around each tick so console commands never
  observe a half-applied transition,
- reports mode transitions through an optional callback.

Runs either as a coroutine (tests, async hosts) or on its own event loop in a
daemon thread next to the blocking console REPL.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .engine import FocusCycleEngine, FocusState

logger = logging.getLogger(__name__)

TransitionCallback = Callable[[FocusState | None, FocusState], None]


async def run_focus_ticker(
        engine: FocusCycleEngine,
        *,
        lock: Any = None,
        interval_seconds: float = 1.0,
        on_transition: TransitionCallback | None = None,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Tick `engine` every interval_seconds until stop_event is set (or the task is cancelled).

    `lock` is any context manager (threading.Lock/RLock); None means no locking.
    on_transition(previous, current) fires when the mode changed during a tick.
    """
    sleep_s = max(0.001, float(interval_seconds))
    guard = lock if lock is not None else contextlib.nullcontext()

    while stop_event is None or not stop_event.is_set():
        try:
            with guard:
                before = engine.state
                after = engine.tick()
        except Exception:
            logger.exception("Focus tick failed")
            before = after = None

        if (
            on_transition is not None
            and after is not None
            and before is not None
            and (before.mode != after.mode or before.cycle_count != after.cycle_count)
        ):
            try:
                on_transition(before, after)
            except Exception:
                logger.exception("Focus transition callback failed")

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)


@dataclass(slots=True)
class FocusTickerRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal ticker stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_ticker_in_background(
        engine: FocusCycleEngine,
        *,
        lock: Any = None,
        interval_seconds: float = 1.0,
        on_transition: TransitionCallback | None = None,
) -> FocusTickerRunner | None:
    """
    Start the ticker on its own event loop in a daemon thread.

    Why a thread: the console REPL blocks on input().
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_focus_ticker(
                    engine,
                    lock=lock,
                    interval_seconds=interval_seconds,
                    on_transition=on_transition,
                    stop_event=stop_event,
                )
            )
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="focus-ticker", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Focus ticker failed to start.")
        return None

    logger.info("Focus ticker started (interval=%.2fs).", interval_seconds)
    return FocusTickerRunner(thread=t, loop=loop, stop_event=stop_event)
