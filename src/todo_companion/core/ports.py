# src/todo_companion/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and speech backends swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """
    Opaque blob store for the canonical task sequence.

    Both methods may raise StorageError; the controller logs and continues.
    """

    def load(self) -> list[dict[str, Any]]: ...
    def save(self, tasks: Iterable[Task]) -> None: ...


class DictationEventKind(StrEnum):
    UPDATE = "update"  # intermediate transcript
    FINAL = "final"  # final transcript
    ERROR = "error"  # capture failed, `code` is set
    END = "end"  # capture finished naturally


@dataclass(slots=True, frozen=True)
class DictationEvent:
    kind: DictationEventKind
    text: str = ""
    code: str | None = None


DictationEmitter = Callable[[DictationEvent], None]


class SpeechBackend(Protocol):
    """
    Speech-to-text producer.

    start() begins one capture and returns immediately; results arrive through
    `emit`, possibly from another thread. stop() asks for the result so far,
    abort() discards it. Both must be safe to call when nothing is running.
    """

    def is_available(self) -> bool: ...
    def start(self, emit: DictationEmitter) -> None: ...
    def stop(self) -> None: ...
    def abort(self) -> None: ...
