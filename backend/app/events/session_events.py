"""Typed session lifecycle events and dispatcher helpers.

The review subsystem subscribes to ``SessionCompleted`` to open a session for
rating; nothing in the scheduling core depends on a listener being present.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger("app.events.sessions")


class SessionEvent(BaseModel):
    """Base class for session domain events."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    session_id: str
    teacher_id: str
    learner_id: str
    skill_id: str


SessionEventListener = Callable[[SessionEvent], None]


class SessionEvents:
    """Registry for session event listeners."""

    _listeners: List[SessionEventListener] = []

    @classmethod
    def register(cls, listener: SessionEventListener) -> None:
        cls._listeners.append(listener)

    @classmethod
    def unregister(cls, listener: SessionEventListener) -> None:
        cls._listeners = [existing for existing in cls._listeners if existing != listener]

    @classmethod
    def listeners(cls) -> Sequence[SessionEventListener]:
        return tuple(cls._listeners)

    @classmethod
    def clear(cls) -> None:
        cls._listeners = []

    @classmethod
    def dispatch(cls, event: SessionEvent) -> None:
        for listener in list(cls._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Session event listener error: %s", listener)
        logger.info("session_event=%s payload=%s", event.__class__.__name__, event.model_dump())


class SessionCreated(SessionEvent):
    start_time: datetime
    end_time: datetime


class SessionConfirmed(SessionEvent):
    confirmed_at: Optional[datetime] = None


class SessionCompleted(SessionEvent):
    completed_at: Optional[datetime] = None


def register_listener(listener: SessionEventListener) -> None:
    """Register an in-process listener for session events."""

    SessionEvents.register(listener)


def unregister_listener(listener: SessionEventListener) -> None:
    """Remove a previously registered listener."""

    SessionEvents.unregister(listener)


def emit_session_created(
    *,
    session_id: str,
    teacher_id: str,
    learner_id: str,
    skill_id: str,
    start_time: datetime,
    end_time: datetime,
) -> SessionCreated:
    event = SessionCreated(
        session_id=session_id,
        teacher_id=teacher_id,
        learner_id=learner_id,
        skill_id=skill_id,
        start_time=start_time,
        end_time=end_time,
    )
    SessionEvents.dispatch(event)
    return event


def emit_session_confirmed(
    *,
    session_id: str,
    teacher_id: str,
    learner_id: str,
    skill_id: str,
    confirmed_at: Optional[datetime] = None,
) -> SessionConfirmed:
    event = SessionConfirmed(
        session_id=session_id,
        teacher_id=teacher_id,
        learner_id=learner_id,
        skill_id=skill_id,
        confirmed_at=confirmed_at,
    )
    SessionEvents.dispatch(event)
    return event


def emit_session_completed(
    *,
    session_id: str,
    teacher_id: str,
    learner_id: str,
    skill_id: str,
    completed_at: Optional[datetime] = None,
) -> SessionCompleted:
    event = SessionCompleted(
        session_id=session_id,
        teacher_id=teacher_id,
        learner_id=learner_id,
        skill_id=skill_id,
        completed_at=completed_at,
    )
    SessionEvents.dispatch(event)
    return event


__all__ = [
    "SessionEvent",
    "SessionEventListener",
    "SessionEvents",
    "SessionCreated",
    "SessionConfirmed",
    "SessionCompleted",
    "register_listener",
    "unregister_listener",
    "emit_session_created",
    "emit_session_confirmed",
    "emit_session_completed",
]
