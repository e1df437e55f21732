# src/lucid/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the focus ticker in a background thread,
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..focus.engine import FocusState
from ..focus.ticker import start_ticker_in_background
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _announce_transition(previous: FocusState | None, current: FocusState) -> None:
    print(f"\n[focus] #{current.task_id}: {current.mode.label} started (cycles {current.cycle_count})", flush=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    ticker = start_ticker_in_background(
        state.focus,
        lock=state.lock,
        interval_seconds=settings.tick_interval_seconds,
        on_transition=_announce_transition,
    )

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        logger.debug("SIGTERM handler not installed.", exc_info=True)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled. Focus ticker only. Press Ctrl+C to stop.")
            try:
                stop_main.wait()
            except KeyboardInterrupt:
                logger.info("Interrupted.")
    finally:
        if ticker is not None:
            ticker.stop()
            ticker.join(timeout=5.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
