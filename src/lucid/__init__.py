"""
Lucid: capture tasks in plain words, schedule them, and work through them
with a pomodoro-style focus timer.
"""
