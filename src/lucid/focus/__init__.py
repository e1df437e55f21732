"""
Focus timer.

- engine.py: work / short break / long break state machine
- ticker.py: once-per-second driver (coroutine + background thread runner)
"""
