"""In-process domain events for the scheduling core."""

from .session_events import (
    SessionCompleted,
    SessionConfirmed,
    SessionCreated,
    SessionEvent,
    SessionEventListener,
    SessionEvents,
    emit_session_completed,
    emit_session_confirmed,
    emit_session_created,
    register_listener,
    unregister_listener,
)

__all__ = [
    "SessionEvent",
    "SessionEventListener",
    "SessionEvents",
    "SessionCreated",
    "SessionConfirmed",
    "SessionCompleted",
    "emit_session_created",
    "emit_session_confirmed",
    "emit_session_completed",
    "register_listener",
    "unregister_listener",
]
