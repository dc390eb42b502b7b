# src/todo_companion/cli/commands.py

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from typing import cast

from ..core.errors import FormatError
from ..core.state import AppState
from ..dictation.session import DictationSnapshot, DictationState
from ..tasks.task_api import now_ms
from ..tasks.task_filter import ALL_CATEGORIES, normalize_selector
from ..tasks.task_io import read_import_file, write_export_file
from ..tasks.task_models import Category, Priority, Task
from ..tasks.task_sort import SortMode

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

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
        except Exception:
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
        lines.append("  Text without a leading '/' is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _parse_choice(enum_cls, raw: str):
    """Exact value or English member name; None if it matches nothing."""
    s = raw.strip()
    for member in enum_cls:
        if s == member.value or s.upper() == member.name:
            return member
    return None


def _parse_due(raw: str) -> int:
    """YYYY-MM-DD -> epoch ms at midnight UTC."""
    d = date.fromisoformat(raw)
    return int(datetime(d.year, d.month, d.day, tzinfo=timezone.utc).timestamp() * 1000)


def format_due(due_ms: int, today: date | None = None) -> str:
    due = datetime.fromtimestamp(due_ms / 1000).date()
    today = today or date.today()
    if due == today:
        return "today"
    if due == today + timedelta(days=1):
        return "tomorrow"
    return f"{due.strftime('%b')} {due.day}"


def format_task_line(n: int, task: Task, *, now: int, today: date | None = None) -> str:
    box = "x" if task.completed else " "
    line = f"{n:>2}. [{box}] {task.title}  ({task.category.name.lower()}/{task.priority.name.lower()})"
    if task.due_date is not None:
        line += f"  due: {format_due(task.due_date, today)}"
        if task.is_overdue(now):
            line += " (overdue)"
    if task.description:
        line += f"\n      {task.description}"
    return line


def _resolve_ref(state: AppState, ref: str) -> str:
    """Position in the last printed list, or a raw task id."""
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(state.last_view_ids):
            return state.last_view_ids[n - 1]
    return ref


def _describe_selector(selector) -> str:
    sel = normalize_selector(selector)
    if sel == ALL_CATEGORIES:
        return "all"
    return sel.name.lower() if isinstance(sel, Category) else str(selector)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [!priority] [#category] [@YYYY-MM-DD] [-- description]
    """
    text = " ".join(args)
    title_part, _, description = text.partition(" -- ")
    if title_part.startswith("-- "):
        title_part, description = "", title_part[3:]

    words: list[str] = []
    priority: Priority | None = None
    category: Category | None = None
    due_date: int | None = None

    for tok in title_part.split():
        if tok.startswith("!") and len(tok) > 1:
            priority = _parse_choice(Priority, tok[1:])
            if priority is None:
                return f"Unknown priority: {tok[1:]}. Use high, medium or low."
        elif tok.startswith("#") and len(tok) > 1:
            category = _parse_choice(Category, tok[1:])
            if category is None:
                return f"Unknown category: {tok[1:]}. Use work, study, life or other."
        elif tok.startswith("@") and len(tok) > 1:
            try:
                due_date = _parse_due(tok[1:])
            except ValueError:
                return f"Bad due date: {tok[1:]}. Use YYYY-MM-DD."
        else:
            words.append(tok)

    task = state.controller.add(
        " ".join(words),
        description.strip() or None,
        category,
        priority,
        due_date,
    )
    if task is None:
        return "Title is required. Usage: /add <title> [!priority] [#category] [@YYYY-MM-DD] [-- description]"
    return f"Added: {task.title}"


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.controller.view(state.filter_selector, state.sort_mode)
    state.last_view_ids = [t.id for t in tasks]
    if not tasks:
        return "No tasks."

    now = now_ms()
    header = f"Tasks (filter: {_describe_selector(state.filter_selector)}, sort: {state.sort_mode.value}):"
    lines = [header]
    lines.extend(format_task_line(i, t, now=now) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task = state.controller.toggle(_resolve_ref(state, args[0]))
    if task is None:
        return f"No such task: {args[0]}"
    return f"{'Completed' if task.completed else 'Reopened'}: {task.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <n|id>"
    task_id = _resolve_ref(state, args[0])
    task = state.controller.get(task_id)
    if task is None or not state.controller.remove(task_id):
        return f"No such task: {args[0]}"
    state.last_view_ids = [i for i in state.last_view_ids if i != task_id]
    return f"Deleted: {task.title}"


def cmd_sort(state: AppState, args: list[str]) -> str:
    """
    /sort                 -> show current mode
    /sort <mode>          -> none | priority | dueDate | createdAt
    """
    modes = ", ".join(m.value for m in SortMode)
    if not args:
        return f"Sort mode: {state.sort_mode.value}. Available: {modes}."
    raw = args[0]
    mode = SortMode.coerce(raw)
    if mode is SortMode.NONE and raw.lower() != SortMode.NONE.value:
        return f"Unknown sort mode: {raw}. Available: {modes}."
    state.sort_mode = mode
    return f"Sort mode set to {mode.value}."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter               -> show current filter
    /filter all|<category>
    """
    if not args:
        return f"Filter: {_describe_selector(state.filter_selector)}."
    raw = args[0]
    if raw.lower() in ("all", ALL_CATEGORIES):
        state.filter_selector = ALL_CATEGORIES
    else:
        category = _parse_choice(Category, raw)
        if category is None:
            return f"Unknown category: {raw}. Use all, work, study, life or other."
        state.filter_selector = category
    return f"Filter set to {_describe_selector(state.filter_selector)}."


def cmd_export(state: AppState, args: list[str]) -> str:
    directory = " ".join(args) if args else state.settings.export_dir
    try:
        path = write_export_file(state.controller.tasks, directory)
    except OSError as e:
        logger.exception("Export failed dir=%s", directory)
        return f"Export failed: {e}"
    return f"Exported {len(state.controller.tasks)} tasks to {path}"


def cmd_import(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /import <path>"
    path = " ".join(args)
    try:
        raw = asyncio.run(read_import_file(path))
        count = state.controller.import_merge(raw)
    except FormatError as e:
        return f"Import failed: {e}"
    return f"Import succeeded: {count} tasks merged."


def cmd_voice(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /voice -> dictate a title; the final transcript is added as a task.
    """
    session = state.dictation

    def on_update(snap: DictationSnapshot) -> None:
        if emit and snap.state is DictationState.LISTENING and snap.text:
            with contextlib.suppress(Exception):
                emit(f"[VOICE] ... {snap.text}")

    unsubscribe = session.subscribe(on_update)
    try:
        if not session.start():
            return f"[VOICE] {session.snapshot().error or 'Voice input failed to start.'}"
        if emit:
            with contextlib.suppress(Exception):
                emit("[VOICE] Listening... (Ctrl+C to cancel)")
        timeout = float(getattr(state.settings, "dictation_max_seconds", 10)) + 60.0
        try:
            snap = session.wait(timeout=timeout)
        except KeyboardInterrupt:
            session.abort()
            return "[VOICE] Cancelled."
        if snap.state is DictationState.LISTENING:
            session.abort()
            return "[VOICE] Timed out waiting for a transcript."
    finally:
        unsubscribe()

    if snap.state is DictationState.ERROR:
        return f"[VOICE] {snap.error}"

    task = state.controller.add(snap.text)
    if task is None:
        return "[VOICE] Nothing was recognized."
    return f"Added: {task.title}"


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.controller.tasks
    done = sum(1 for t in tasks if t.completed)
    voice = "available" if state.dictation.is_supported() else "unavailable"
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({len(tasks) - done} open, {done} done)\n"
        f"  Sort: {state.sort_mode.value}\n"
        f"  Filter: {_describe_selector(state.filter_selector)}\n"
        f"  Storage: {getattr(state.settings, 'todos_db_path', '?')}\n"
        f"  Voice input: {voice}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [!high|medium|low] [#work|study|life|other] [@YYYY-MM-DD] [-- description].",
)
registry.register("list", cmd_list, help_text="Show tasks with the current filter and sort.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n|id>.", aliases=["del"])
registry.register("sort", cmd_sort, help_text="Sort mode: /sort none | priority | dueDate | createdAt.")
registry.register("filter", cmd_filter, help_text="Category filter: /filter all | work | study | life | other.")
registry.register("export", cmd_export, help_text="Export tasks to todos-<date>.json: /export [dir].")
registry.register("import", cmd_import, help_text="Import and merge a JSON file: /import <path>.")
registry.register("voice", cmd_voice, help_text="Dictate a new task title.")
registry.register("status", cmd_status, help_text="Show counts, view options and storage.")
