# backend/app/services/session_lifecycle.py
"""
Session lifecycle state machine.

    PENDING -> CONFIRMED -> COMPLETED

No other edge exists: no self loops, no skipping CONFIRMED, nothing leaves
COMPLETED. Applying a transition stamps the matching timestamp column.
"""

import logging
from typing import Dict, FrozenSet, Union

from ..core.exceptions import InvalidTransitionException
from ..core.timezone_utils import utc_now
from ..models.session import SessionStatus, SkillSession
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

INITIAL_STATUS = SessionStatus.PENDING

ALLOWED_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.PENDING: frozenset({SessionStatus.CONFIRMED}),
    SessionStatus.CONFIRMED: frozenset({SessionStatus.COMPLETED}),
    SessionStatus.COMPLETED: frozenset(),
}

StatusLike = Union[SessionStatus, str]


def _as_status(value: StatusLike) -> SessionStatus:
    return value if isinstance(value, SessionStatus) else SessionStatus(value)


def is_terminal(status: StatusLike) -> bool:
    return not ALLOWED_TRANSITIONS[_as_status(status)]


def can_transition(from_status: StatusLike, to_status: StatusLike) -> bool:
    """Check whether ``from_status -> to_status`` is an edge of the lifecycle."""
    return _as_status(to_status) in ALLOWED_TRANSITIONS[_as_status(from_status)]


def apply_transition(session: SkillSession, to_status: StatusLike) -> SkillSession:
    """
    Move a session to a new status.

    Mutates the ORM object in place; persisting is the caller's job.

    Raises:
        InvalidTransitionException: If the edge is not allowed
    """
    current = _as_status(session.status)
    target = _as_status(to_status)

    if not can_transition(current, target):
        raise InvalidTransitionException(current.value, target.value)

    session.status = target.value
    if target == SessionStatus.CONFIRMED:
        session.confirmed_at = utc_now()
    elif target == SessionStatus.COMPLETED:
        session.completed_at = utc_now()

    prometheus_metrics.record_session_transition(current.value, target.value)
    logger.info(f"Session {session.id} transitioned {current.value} -> {target.value}")
    return session
