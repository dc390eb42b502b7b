# src/todo_companion/core/errors.py

"""
Error kinds.

Only FormatError and CaptureError ever reach the user, and only at the boundary
where the action started (the import command, the dictation status line).
StorageError is logged and recovered by the controller.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for todo_companion errors. str(err) is user-displayable."""


class ValidationError(TodoError):
    """A task could not be created (blank title)."""


class FormatError(TodoError):
    """An import payload is not a JSON array of task-shaped records."""


class StorageError(TodoError):
    """The persistence backend failed to read or write."""


class CaptureError(TodoError):
    """Dictation failed. `code` is one of the codes in dictation.messages."""

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)
