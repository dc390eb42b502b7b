"""
Voice input.

- session.py: state machine the UI talks to
- openai_backend.py: microphone + transcription backend
- messages.py: capture error codes and user-facing messages
"""
