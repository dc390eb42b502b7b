# src/todo_companion/dictation/messages.py

from __future__ import annotations

from ..core.errors import CaptureError

UNSUPPORTED = "unsupported"
NO_SPEECH = "no-speech"
AUDIO_CAPTURE = "audio-capture"
NOT_ALLOWED = "not-allowed"
NETWORK = "network"
SERVICE_NOT_ALLOWED = "service-not-allowed"
ABORTED = "aborted"
START_FAILED = "start-failed"

_MESSAGES: dict[str, str] = {
    UNSUPPORTED: (
        "Voice input is not available. Install the 'voice' extra, enable "
        "TODO_DICTATION_ENABLED and set TODO_OPENAI_API_KEY."
    ),
    NO_SPEECH: "No speech was detected, please try again.",
    AUDIO_CAPTURE: "Cannot access the microphone, check that an input device is connected.",
    NOT_ALLOWED: "Microphone permission was denied.",
    NETWORK: "Cannot reach the speech recognition service. Check your network or TODO_OPENAI_BASE_URL.",
    SERVICE_NOT_ALLOWED: "The speech recognition service refused the request. Check TODO_OPENAI_API_KEY.",
    ABORTED: "Voice input was aborted.",
    START_FAILED: "Could not start voice input, please try again later.",
}


def message_for(code: str) -> str:
    return _MESSAGES.get(code) or f"Speech recognition error: {code}"


def capture_error(code: str) -> CaptureError:
    return CaptureError(code, message_for(code))


def classify_exception(exc: BaseException) -> str:
    """
    Map a backend exception to a capture error code.

    Matches on class names so we don't have to import optional libraries here.
    """
    if isinstance(exc, CaptureError):
        return exc.code

    name = exc.__class__.__name__
    if name in {"APIConnectionError", "APITimeoutError", "ConnectError", "ConnectTimeout", "ReadTimeout"}:
        return NETWORK
    if name in {"AuthenticationError", "PermissionDeniedError", "UnauthorizedError"}:
        return SERVICE_NOT_ALLOWED
    if name == "PortAudioError":
        return AUDIO_CAPTURE
    if isinstance(exc, PermissionError):
        return NOT_ALLOWED
    return name
