# src/lucid/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..focus.engine import ConflictError, FocusState, format_time
from ..parsing.task_parser import TaskParseError
from ..tasks.datetime_reconciler import to_timestamp
from ..tasks.task_models import Task, TaskOrigin, TaskRecord

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._unlocked: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        locked: bool = True,
    ) -> None:
        """
        locked=False marks a handler that must run without the shared state lock
        (slow LLM calls that only touch the pending candidate).
        """
        aliases = aliases or []
        key = name.lower()
        self._help[key] = help_text
        for k in [key, *(a.lower() for a in aliases)]:
            self._handlers[k] = handler
            if locked:
                self._unlocked.discard(k)
            else:
                self._unlocked.add(k)

    def requires_lock(self, line: str) -> bool:
        parts = line[1:].split() if line.startswith("/") else []
        return not parts or parts[0].lower() not in self._unlocked

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

def render_record(rec: TaskRecord, title: str = "Task Details") -> str:
    lines = [
        f"{title}:",
        f"  Task: {rec.name}",
        f"  Date: {rec.date_text}",
    ]
    if rec.time_text:
        lines.append(f"  Time: {rec.time_text}")
    lines.append(f"  Priority: {rec.priority.value}")
    lines.append(f"  Category: {rec.category.value}")
    return "\n".join(lines)


def render_timer(st: FocusState) -> str:
    paused = " (paused)" if st.is_paused else ""
    return f"[{st.mode.label} {format_time(st.time_left)}{paused} | cycles {st.cycle_count}]"


def render_task_line(t: Task, timer: FocusState | None = None) -> str:
    marker = "[G] " if t.origin is TaskOrigin.EXTERNAL else ""
    when = f"{t.date_text} {t.time_text or ''}".rstrip()
    line = f"#{t.id} {marker}{t.name} - {when} ({t.category.value}, {t.priority.value})"
    if timer is not None and timer.task_id == t.id:
        line += " " + render_timer(timer)
    return line


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


# ---- task intake ----

def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add <task description>, e.g. /add Meeting with Jake at 3 PM Thursday"

    if emit:
        with contextlib.suppress(Exception):
            emit("Thinking...")

    try:
        rec = state.intake.submit(text)
    except TaskParseError as e:
        return str(e)

    if rec is None:
        return "Nothing to schedule."
    return render_record(rec) + "\nUse /accept, /edit <field> <value>, or /cancel."


def cmd_show(state: AppState, args: list[str]) -> str:
    intake = state.intake
    if intake.candidate is None:
        return "No pending task. Describe one with /add."
    out = render_record(intake.candidate)
    if intake.draft is not None and intake.draft != intake.candidate:
        out += "\n" + render_record(intake.draft, title="Unsaved edit")
    return out


def cmd_edit(state: AppState, args: list[str]) -> str:
    if state.intake.draft is None:
        return "No pending task to edit."
    if not args:
        return "Usage: /edit <taskName|date|time|category|priority> <value>  (empty time = all day)"
    draft = state.intake.edit(args[0], " ".join(args[1:]))
    if draft is None:
        return "No pending task to edit."
    return render_record(draft, title="Edit Task") + "\nUse /save to keep these changes."


def cmd_save(state: AppState, args: list[str]) -> str:
    rec = state.intake.save_edit()
    if rec is None:
        return "No pending task."
    return render_record(rec)


def cmd_accept(state: AppState, args: list[str]) -> str:
    task_id = state.intake.accept()
    if task_id is None:
        return "No pending task to accept."
    return f"Task #{task_id} scheduled."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.intake.cancel()
    return "Pending task discarded."


# ---- task lists ----

def cmd_list(state: AppState, args: list[str]) -> str:
    timer = state.focus.state
    active = state.tasks.active_tasks_by_priority()
    completed = state.tasks.completed_tasks()
    if not active and not completed:
        return "No tasks yet."

    lines: list[str] = []
    if active:
        lines.append("Accepted Tasks:")
        lines.extend("  " + render_task_line(t, timer) for t in active)
    if completed:
        lines.append("Completed Tasks:")
        lines.extend("  " + render_task_line(t) for t in completed)
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /done <id>  (toggles; also revives a completed task)"
    t = state.tasks.toggle_status(task_id)
    if t is None:
        return f"No task #{task_id}."
    return f"Task #{t.id} is now {t.status.value}."


def cmd_calendar(state: AppState, args: list[str]) -> str:
    events = sorted(state.tasks.calendar_events(), key=lambda e: (e.start, e.task_id))
    if not events:
        return "Calendar is empty."
    lines = ["Calendar:"]
    for ev in events:
        when = f"{ev.start:%Y-%m-%d}" + (" all day" if ev.all_day else f" {ev.start:%H:%M}")
        lines.append(f"  {when}  #{ev.task_id} {ev.title}  <{ev.css_class}>")
    return "\n".join(lines)


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <id> <date> [at <time>]
    Reschedules like a calendar drag: without "at <time>" the task becomes all-day.
    """
    task_id = _parse_task_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /move <id> <date> [at <time>], e.g. /move 3 July 26, 2024 at 3:00 PM"

    rest = args[1:]
    lowered = [a.lower() for a in rest]
    if "at" in lowered:
        i = lowered.index("at")
        date_text, time_text = " ".join(rest[:i]), " ".join(rest[i + 1 :]) or None
    else:
        date_text, time_text = " ".join(rest), None

    start = to_timestamp(date_text, time_text)
    if start is None:
        return f"Could not understand date/time: {date_text} {time_text or ''}".rstrip()

    t = state.tasks.apply_calendar_move(task_id, start, time_text is None)
    if t is None:
        return f"No task #{task_id}."
    return f"Task #{t.id} moved to {t.date_text} {t.time_text or '(all day)'}."


# ---- focus timer ----

def cmd_start(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /start <id>"
    try:
        st = state.focus.start(task_id)
    except ConflictError as e:
        return str(e)
    if st is None:
        return f"Task #{task_id} is not an active task."
    return f"Focus started on #{task_id} {render_timer(st)}"


def cmd_pause(state: AppState, args: list[str]) -> str:
    st = state.focus.pause_resume()
    if st is None:
        return "No focus timer running."
    return ("Paused " if st.is_paused else "Resumed ") + render_timer(st)


def cmd_skip(state: AppState, args: list[str]) -> str:
    st = state.focus.skip()
    if st is None:
        return "No focus timer running."
    return "Skipped to " + render_timer(st)


def cmd_reset(state: AppState, args: list[str]) -> str:
    state.focus.reset()
    return "Focus timer reset."


def cmd_timer(state: AppState, args: list[str]) -> str:
    st = state.focus.state
    if st is None:
        return "No focus timer running."
    return f"#{st.task_id} {render_timer(st)}"


def cmd_settings(state: AppState, args: list[str]) -> str:
    """
    /settings               -> show focus settings
    /settings <field> <n>   -> set work | shortBreak | longBreak | cycles
    """
    cfg = state.focus.settings
    if len(args) >= 2:
        if not cfg.update(args[0], args[1]):
            return f"Ignored invalid setting: {args[0]}={args[1]} (positive whole numbers only)."
    return (
        "Pomodoro Settings:\n"
        f"  work: {cfg.work} min\n"
        f"  shortBreak: {cfg.short_break} min\n"
        f"  longBreak: {cfg.long_break} min\n"
        f"  cycles: {cfg.cycles}"
    )


# ---- calendar integration ----

def cmd_connect(state: AppState, args: list[str]) -> str:
    user = " ".join(args).strip() or str(getattr(state.settings, "calendar_user", "") or "")
    state.calendar.connect(user)
    return f"Connected as: {state.calendar.user}. Use /sync to import events."


def cmd_sync(state: AppState, args: list[str]) -> str:
    if not state.calendar.connected:
        return "Calendar is not connected. Use /connect first."
    try:
        n = state.calendar.sync_now()
    except Exception:
        logger.exception("Calendar sync failed.")
        return "Calendar sync failed. Try again later."
    return f"Synced {n} calendar event(s)."


def cmd_disconnect(state: AppState, args: list[str]) -> str:
    removed = state.calendar.disconnect()
    return f"Calendar disconnected; removed {removed} synced task(s)."


# ---- misc ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    models = ", ".join(list(getattr(state.settings, "llm_models", []) or []))
    cal = f"connected as {state.calendar.user}" if state.calendar.connected else "not connected"
    timer = state.focus.state
    return (
        "Status:\n"
        f"  Parser: {type(state.llm).__name__}\n"
        f"  Models (priority -> fallback): {models}\n"
        f"  Tasks: {state.tasks.count_tasks()}\n"
        f"  Calendar: {cal}\n"
        f"  Timer: {render_timer(timer) if timer else 'idle'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show parser, calendar and timer status.")
registry.register(
    "add",
    cmd_add,
    help_text="Describe a task in plain words (plain text works too).",
    locked=False,
)
registry.register("show", cmd_show, help_text="Show the pending task.")
registry.register("edit", cmd_edit, help_text="Edit the pending task: /edit <field> <value>.")
registry.register("save", cmd_save, help_text="Keep edits to the pending task.")
registry.register("accept", cmd_accept, help_text="Schedule the pending task.", aliases=["ok"])
registry.register("cancel", cmd_cancel, help_text="Discard the pending task.")
registry.register("list", cmd_list, help_text="List active (by priority) and completed tasks.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Complete or revive a task: /done <id>.", aliases=["revive"])
registry.register("calendar", cmd_calendar, help_text="Show the calendar view.", aliases=["cal"])
registry.register("move", cmd_move, help_text="Reschedule: /move <id> <date> [at <time>].")
registry.register("start", cmd_start, help_text="Start a focus timer: /start <id>.")
registry.register("pause", cmd_pause, help_text="Pause/resume the focus timer.", aliases=["resume"])
registry.register("skip", cmd_skip, help_text="Skip to the next work/break interval.")
registry.register("reset", cmd_reset, help_text="Stop the focus timer.")
registry.register("timer", cmd_timer, help_text="Show the focus timer.")
registry.register("settings", cmd_settings, help_text="Pomodoro settings: /settings [field value].")
registry.register("connect", cmd_connect, help_text="Connect the calendar: /connect [account].")
registry.register("sync", cmd_sync, help_text="Import calendar events now.")
registry.register("disconnect", cmd_disconnect, help_text="Disconnect the calendar and drop its tasks.")
