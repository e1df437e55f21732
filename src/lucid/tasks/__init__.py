"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskRecord, Priority, Category, ...)
- datetime_reconciler.py: (date text, time text) <-> calendar datetime
- task_store.py: in-memory store, status transitions, priority ordering
"""
