# tests/test_commands.py

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

from todo_companion.cli.commands import CommandRegistry, format_due, registry
from todo_companion.connectors.console_connector import handle_line
from todo_companion.core.state import AppState
from todo_companion.dictation.session import DictationSession
from todo_companion.tasks.task_models import Category, Priority
from todo_companion.tasks.task_sort import SortMode

from .fakes import FakeSpeechBackend, ScriptedSpeechBackend


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_add_parses_markers(state: AppState) -> None:
    reply = registry.handle(state, "/add Write report !high #work @2030-01-02 -- for the board")
    assert reply == "Added: Write report"

    (task,) = state.controller.tasks
    assert task.priority is Priority.HIGH
    assert task.category is Category.WORK
    assert task.description == "for the board"
    assert task.due_date == 1893542400000  # 2030-01-02T00:00:00Z


def test_add_rejects_blank_and_bad_markers(state: AppState) -> None:
    assert "Title is required" in (registry.handle(state, "/add !high") or "")
    assert "Unknown priority" in (registry.handle(state, "/add x !urgent") or "")
    assert "Bad due date" in (registry.handle(state, "/add x @tomorrow") or "")
    assert state.controller.tasks == ()


def test_plain_text_becomes_a_task(state: AppState) -> None:
    assert handle_line(state, "buy milk") == "Added: buy milk"
    assert handle_line(state, "    ") is None
    assert [t.title for t in state.controller.tasks] == ["buy milk"]


def test_list_done_rm_by_position(state: AppState) -> None:
    handle_line(state, "/add first !low")
    handle_line(state, "/add second !high")
    assert registry.handle(state, "/sort priority") == "Sort mode set to priority."

    listing = registry.handle(state, "/list") or ""
    assert listing.index("second") < listing.index("first")

    assert registry.handle(state, "/done 1") == "Completed: second"
    assert registry.handle(state, "/done 1") == "Reopened: second"
    assert registry.handle(state, "/rm 2") == "Deleted: first"
    assert [t.title for t in state.controller.tasks] == ["second"]
    assert "No such task" in (registry.handle(state, "/rm nope") or "")


def test_sort_and_filter_options(state: AppState) -> None:
    assert "Unknown sort mode" in (registry.handle(state, "/sort sideways") or "")
    registry.handle(state, "/sort dueDate")
    assert state.sort_mode is SortMode.DUE_DATE

    handle_line(state, "/add report #work")
    handle_line(state, "/add gym #life")
    assert registry.handle(state, "/filter work") == "Filter set to work."
    listing = registry.handle(state, "/list") or ""
    assert "report" in listing and "gym" not in listing

    assert registry.handle(state, "/filter all") == "Filter set to all."
    assert "Unknown category" in (registry.handle(state, "/filter pets") or "")


def test_export_and_import(state: AppState, tmp_path: Path) -> None:
    handle_line(state, "/add exported")
    reply = registry.handle(state, f"/export {tmp_path}") or ""
    assert reply.startswith("Exported 1 tasks")
    (exported,) = tmp_path.glob("todos-*.json")

    incoming = tmp_path / "incoming.json"
    records = json.loads(exported.read_text("utf-8"))
    records[0]["title"] = "renamed"
    records.append({"id": "ext-1", "title": "from elsewhere", "category": "学习"})
    incoming.write_text(json.dumps(records, ensure_ascii=False), "utf-8")

    assert registry.handle(state, f"/import {incoming}") == "Import succeeded: 2 tasks merged."
    assert [t.title for t in state.controller.tasks] == ["renamed", "from elsewhere"]


def test_import_failure_message(state: AppState, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text('{"not": "a list"}', "utf-8")
    reply = registry.handle(state, f"/import {bad}") or ""
    assert reply.startswith("Import failed:")
    assert state.controller.tasks == ()

    missing = registry.handle(state, f"/import {tmp_path / 'nope.json'}") or ""
    assert "Failed to read" in missing


def test_voice_adds_final_transcript(state: AppState) -> None:
    state.dictation = DictationSession(ScriptedSpeechBackend(["call", "call mom"], "call mom tonight"))
    notes: list[str] = []
    reply = registry.handle(state, "/voice", emit=notes.append)
    assert reply == "Added: call mom tonight"
    assert "[VOICE] ... call mom" in notes


def test_voice_reports_unsupported(state: AppState) -> None:
    state.dictation = DictationSession(FakeSpeechBackend(available=False))
    reply = registry.handle(state, "/voice") or ""
    assert reply.startswith("[VOICE] Voice input is not available")
    assert state.controller.tasks == ()


def test_status(state: AppState) -> None:
    handle_line(state, "/add a")
    reply = registry.handle(state, "/status") or ""
    assert "Tasks: 1 (1 open, 0 done)" in reply
    assert "Voice input: available" in reply


def _noon_ms(d: date) -> int:
    return int(datetime(d.year, d.month, d.day, 12).timestamp() * 1000)


def test_format_due() -> None:
    today = date(2024, 5, 1)
    assert format_due(_noon_ms(date(2024, 5, 1)), today) == "today"
    assert format_due(_noon_ms(date(2024, 5, 2)), today) == "tomorrow"
    assert format_due(_noon_ms(date(2024, 6, 9)), today) == "Jun 9"
