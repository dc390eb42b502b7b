# src/todo_companion/dictation/session.py

from __future__ import annotations

"""
Dictation session: a small state machine in front of a SpeechBackend.

    IDLE --start--> LISTENING --final/end/stop/abort--> IDLE
                              --error-----------------> ERROR

Backends may emit from a worker thread. Each capture gets a generation number;
events from older generations are dropped. After stop() the same capture may
still deliver its final transcript, after abort() nothing is accepted.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..core.ports import DictationEvent, DictationEventKind, SpeechBackend
from . import messages

logger = logging.getLogger(__name__)


class DictationState(StrEnum):
    IDLE = "idle"
    LISTENING = "listening"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class DictationSnapshot:
    state: DictationState
    text: str = ""
    is_final: bool = False
    error_code: str | None = None
    error: str | None = None


DictationListener = Callable[[DictationSnapshot], None]


class DictationSession:
    def __init__(self, backend: SpeechBackend) -> None:
        self._backend = backend
        self._cond = threading.Condition(threading.RLock())
        self._listeners: list[DictationListener] = []

        self._state = DictationState.IDLE
        self._text = ""
        self._is_final = False
        self._error_code: str | None = None
        self._generation = 0
        self._late_final_allowed = False

    # ---- observation ----

    def is_supported(self) -> bool:
        try:
            return bool(self._backend.is_available())
        except Exception:
            logger.debug("Speech backend availability check failed.", exc_info=True)
            return False

    @property
    def state(self) -> DictationState:
        return self._state

    def snapshot(self) -> DictationSnapshot:
        with self._cond:
            return DictationSnapshot(
                state=self._state,
                text=self._text,
                is_final=self._is_final,
                error_code=self._error_code,
                error=messages.message_for(self._error_code) if self._error_code else None,
            )

    def subscribe(self, listener: DictationListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        with self._cond:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._cond:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def wait(self, timeout: float | None = None) -> DictationSnapshot:
        """Block until the session is no longer LISTENING (or timeout)."""
        with self._cond:
            self._cond.wait_for(lambda: self._state is not DictationState.LISTENING, timeout)
            return self.snapshot()

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Dictation listener crashed.")
        self._cond.notify_all()

    # ---- commands ----

    def start(self) -> bool:
        """
        Begin a capture. Returns True if the backend accepted it.

        Never raises: an unsupported backend or a failing start moves the
        session to ERROR and notifies listeners.
        """
        with self._cond:
            if self._state is DictationState.LISTENING:
                return True

            self._generation += 1
            gen = self._generation
            self._text = ""
            self._is_final = False
            self._error_code = None
            self._late_final_allowed = False

            if not self.is_supported():
                self._fail(messages.UNSUPPORTED)
                return False

            self._state = DictationState.LISTENING
            self._notify()

            try:
                self._backend.start(lambda ev: self._on_event(gen, ev))
            except Exception as e:
                logger.info("Speech backend failed to start: %s", e.__class__.__name__)
                if gen == self._generation and self._state is DictationState.LISTENING:
                    self._fail(messages.START_FAILED)
                return False
            return True

    def stop(self) -> None:
        """Stop listening and keep the transcript (a pending final may still arrive)."""
        with self._cond:
            if self._state is not DictationState.LISTENING:
                return
            self._state = DictationState.IDLE
            self._late_final_allowed = True
            self._notify()
        self._call_backend("stop")

    def abort(self) -> None:
        """Stop listening and discard everything from this capture."""
        with self._cond:
            if self._state is not DictationState.LISTENING:
                return
            self._generation += 1
            self._state = DictationState.IDLE
            self._text = ""
            self._is_final = False
            self._late_final_allowed = False
            self._notify()
        self._call_backend("abort")

    def _call_backend(self, name: str) -> None:
        try:
            getattr(self._backend, name)()
        except Exception:
            logger.debug("Speech backend %s() failed.", name, exc_info=True)

    def _fail(self, code: str) -> None:
        self._state = DictationState.ERROR
        self._error_code = code
        self._late_final_allowed = False
        logger.info("Dictation error code=%s", code)
        self._notify()

    # ---- backend events ----

    def _on_event(self, gen: int, event: DictationEvent) -> None:
        with self._cond:
            if gen != self._generation:
                return

            if self._state is DictationState.LISTENING:
                if event.kind is DictationEventKind.UPDATE:
                    self._text = event.text
                    self._is_final = False
                    self._notify()
                elif event.kind is DictationEventKind.FINAL:
                    self._text = event.text
                    self._is_final = True
                    self._state = DictationState.IDLE
                    self._notify()
                elif event.kind is DictationEventKind.ERROR:
                    self._fail(event.code or "unknown")
                elif event.kind is DictationEventKind.END:
                    self._state = DictationState.IDLE
                    self._notify()
                return

            if self._late_final_allowed and event.kind is DictationEventKind.FINAL:
                self._late_final_allowed = False
                self._text = event.text
                self._is_final = True
                self._notify()
