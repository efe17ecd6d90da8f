# backend/app/services/conflict_detector.py
"""
Conflict Detector for the SkillSwap platform.

Answers one question: does a proposed interval overlap any active
(PENDING or CONFIRMED) session of either participant?

Intervals are half-open, [start, end). Two intervals overlap when
``a.start < b.end and a.end > b.start``, so sessions that merely touch at an
endpoint do not conflict. Empty or inverted intervals never reach this
service; the caller rejects them first.
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.timezone_utils import ensure_utc
from ..models.session import SkillSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.session_repository import SessionRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """Half-open time interval [start, end)."""

    start: datetime
    end: datetime

    @property
    def is_empty(self) -> bool:
        return not ensure_utc(self.start) < ensure_utc(self.end)


@dataclass(frozen=True)
class Participants:
    """The two people a session binds."""

    teacher_id: str
    learner_id: str


def intervals_overlap(a: Interval, b: Interval) -> bool:
    """Half-open overlap test; touching endpoints do not overlap."""
    return ensure_utc(a.start) < ensure_utc(b.end) and ensure_utc(a.end) > ensure_utc(b.start)


def conflict_scope(conflict: SkillSession, participants: Participants) -> str:
    """Which participant's calendar the conflict sits on."""
    return "teacher" if conflict.teacher_id == participants.teacher_id else "learner"


class ConflictDetector(BaseService):
    """
    Service for detecting scheduling conflicts.

    Scans the sessions of both participants; the teacher's existing sessions
    and the learner's existing sessions are equally blocking.
    """

    def __init__(self, db: Session, repository: Optional[SessionRepository] = None):
        """
        Initialize conflict detector.

        Args:
            db: Database session
            repository: Optional SessionRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_session_repository(db)

    @BaseService.measure_operation("find_conflict")
    def find_conflict(
        self,
        participants: Participants,
        interval: Interval,
        exclude_session_id: Optional[str] = None,
    ) -> Optional[SkillSession]:
        """
        Find an active session that conflicts with the proposed interval.

        Args:
            participants: Teacher and learner of the proposed session
            interval: Proposed [start, end)
            exclude_session_id: Session to ignore (the one being updated)

        Returns:
            One conflicting session (which one is unspecified), or None
        """
        conflict = self.repository.find_overlapping(
            ensure_utc(interval.start),
            ensure_utc(interval.end),
            teacher_id=participants.teacher_id,
            learner_id=participants.learner_id,
            exclude_session_id=exclude_session_id,
        )

        if conflict is not None:
            scope = conflict_scope(conflict, participants)
            prometheus_metrics.record_scheduling_conflict(scope)
            self.logger.warning(
                f"Scheduling conflict on {scope} calendar with session {conflict.id}",
                extra={
                    "teacher_id": participants.teacher_id,
                    "learner_id": participants.learner_id,
                    "conflicting_session_id": conflict.id,
                },
            )

        return conflict
