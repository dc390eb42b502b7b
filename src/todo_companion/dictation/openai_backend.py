# src/todo_companion/dictation/openai_backend.py

from __future__ import annotations

import io
import logging
import threading
import time
import wave
from typing import Any

from openai import OpenAI

from ..core.ports import DictationEmitter, DictationEvent, DictationEventKind
from . import messages

logger = logging.getLogger(__name__)


class OpenAIDictationBackend:
    """
    Microphone capture (sounddevice) + OpenAI-compatible transcription.

    Design goals:
    - Optional dependency: without sounddevice (or without an API key) the
      backend reports itself unavailable instead of crashing.
    - Recording and the HTTP call run in a worker thread; start() returns at once.
    - stop() ends the recording early and still transcribes; abort() drops it.
    """

    def __init__(self, settings: Any) -> None:
        self._settings = settings
        self._available = False
        self._sd: Any = None  # sounddevice module (runtime import)
        self._client: OpenAI | None = None

        self._lock = threading.Lock()
        self._worker: threading.Thread | None = None
        self._stop_requested = threading.Event()
        self._abort_requested = threading.Event()

        if not getattr(settings, "dictation_enabled", False):
            logger.info("Dictation disabled.")
            return

        if not (getattr(settings, "openai_api_key", None) or "").strip():
            logger.warning("Dictation is enabled, but TODO_OPENAI_API_KEY is not set.")
            return

        try:
            import sounddevice as sd  # type: ignore
        except Exception as e:
            logger.warning(
                "Dictation is enabled, but sounddevice failed to import. "
                "Install the 'voice' extra to enable it. Error: %s",
                repr(e),
            )
            return

        self._sd = sd
        self._available = True
        logger.info(
            "Dictation ready (model=%s, language=%s).",
            settings.transcribe_model,
            settings.dictation_language,
        )

    # ---- SpeechBackend ----

    def is_available(self) -> bool:
        return self._available

    def start(self, emit: DictationEmitter) -> None:
        if not self._available:
            raise messages.capture_error(messages.UNSUPPORTED)

        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                raise RuntimeError("A capture is already running.")
            self._stop_requested.clear()
            self._abort_requested.clear()
            self._worker = threading.Thread(target=self._run, args=(emit,), daemon=True)
            self._worker.start()

    def stop(self) -> None:
        self._stop_requested.set()

    def abort(self) -> None:
        self._abort_requested.set()
        self._stop_requested.set()

    # ---- worker ----

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                base_url=str(self._settings.openai_base_url),
                api_key=str(self._settings.openai_api_key),
                timeout=30.0,
                max_retries=0,
            )
        return self._client

    def _run(self, emit: DictationEmitter) -> None:
        logger.debug("Dictation worker started.")
        try:
            pcm = self._record()
            if self._abort_requested.is_set():
                return
            text = self._transcribe(_to_wav(pcm, self._settings.dictation_sample_rate), emit)
            if self._abort_requested.is_set():
                return
            text = text.strip()
            if not text:
                emit(DictationEvent(DictationEventKind.ERROR, code=messages.NO_SPEECH))
            else:
                emit(DictationEvent(DictationEventKind.FINAL, text=text))
        except Exception as e:
            code = messages.classify_exception(e)
            logger.info("Dictation failed code=%s (%s)", code, e.__class__.__name__)
            if not self._abort_requested.is_set():
                emit(DictationEvent(DictationEventKind.ERROR, code=code))
        finally:
            if not self._abort_requested.is_set():
                emit(DictationEvent(DictationEventKind.END))
            logger.debug("Dictation worker finished.")

    def _record(self) -> bytes:
        sd = self._sd
        rate = int(self._settings.dictation_sample_rate)
        max_seconds = float(self._settings.dictation_max_seconds)
        frames = int(max_seconds * rate)

        buf = sd.rec(frames, samplerate=rate, channels=1, dtype="int16")
        t0 = time.monotonic()
        self._stop_requested.wait(timeout=max_seconds)
        elapsed = time.monotonic() - t0
        sd.stop()

        used = min(frames, int(elapsed * rate))
        return buf[:used].tobytes()

    def _transcribe(self, wav_bytes: bytes, emit: DictationEmitter) -> str:
        client = self._get_client()
        kwargs: dict[str, Any] = {
            "model": self._settings.transcribe_model,
            "file": ("speech.wav", wav_bytes, "audio/wav"),
        }
        language = (self._settings.dictation_language or "").strip()
        if language:
            kwargs["language"] = language

        if not self._settings.dictation_stream:
            result = client.audio.transcriptions.create(**kwargs)
            return getattr(result, "text", "") or ""

        partial = ""
        final: str | None = None
        for event in client.audio.transcriptions.create(stream=True, **kwargs):
            if self._abort_requested.is_set():
                break
            etype = getattr(event, "type", "")
            if etype == "transcript.text.delta":
                partial += getattr(event, "delta", "") or ""
                emit(DictationEvent(DictationEventKind.UPDATE, text=partial))
            elif etype == "transcript.text.done":
                final = getattr(event, "text", None)
        return final if final is not None else partial


def _to_wav(pcm: bytes, sample_rate: int) -> bytes:
    """Wrap mono 16-bit PCM into a WAV container."""
    out = io.BytesIO()
    with wave.open(out, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(int(sample_rate))
        w.writeframes(pcm)
    return out.getvalue()
