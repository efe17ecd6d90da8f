# backend/app/services/session_store.py
"""
Session Store for the SkillSwap platform.

Owns every write to the sessions table. Creation runs existence checks, the
offering check, the conflict check and the insert as one unit while holding
the booking mutex of both participants, so two overlapping requests that
share a teacher or a learner can never both succeed. Status and notes
updates lock the single row.

Sessions are never deleted and their interval never changes.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..core.enums import EntityKind
from ..core.exceptions import (
    EntityNotFoundException,
    InvalidIntervalException,
    OfferingMissingException,
    SchedulingConflictException,
)
from ..core.participant_lock import participant_locks
from ..core.timezone_utils import ensure_utc
from ..models.session import SessionStatus, SkillSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.directory_repository import DirectoryRepository
from ..repositories.session_repository import SessionRepository
from ..schemas.session import SessionCreate, SessionUpdate
from .base import BaseService
from .conflict_detector import ConflictDetector, Interval, Participants, conflict_scope
from .session_lifecycle import INITIAL_STATUS, apply_transition

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Time slot conflicts with existing session"
TEACHER_CONFLICT_MESSAGE = "Teacher already has a session at this time"
LEARNER_CONFLICT_MESSAGE = "Learner already has a session at this time"

TEACHER_EXCLUSION_CONSTRAINT = "sessions_no_overlap_per_teacher"
LEARNER_EXCLUSION_CONSTRAINT = "sessions_no_overlap_per_learner"


class SessionStore(BaseService):
    """
    Service that persists sessions atomically.

    Collaborators are injectable for tests; by default they share the
    store's database session.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[SessionRepository] = None,
        directory_repository: Optional[DirectoryRepository] = None,
        conflict_detector: Optional[ConflictDetector] = None,
    ):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_session_repository(db)
        self.directory_repository = (
            directory_repository or RepositoryFactory.create_directory_repository(db)
        )
        self.conflict_detector = conflict_detector or ConflictDetector(db, self.repository)

    @staticmethod
    def _is_deadlock_error(exc: OperationalError) -> bool:
        orig = getattr(exc, "orig", None)
        pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        if pgcode == "40P01":
            return True
        return "deadlock detected" in str(exc).lower()

    @staticmethod
    def _resolve_integrity_conflict(integrity_error: IntegrityError) -> Optional[str]:
        """Return the conflict scope for an exclusion violation, or None for other violations."""
        constraint_name = ""
        orig = getattr(integrity_error, "orig", None)
        diag = getattr(orig, "diag", None)

        if diag is not None:
            constraint_name = getattr(diag, "constraint_name", "") or ""

        if not constraint_name and orig is not None:
            text = str(orig)
            if TEACHER_EXCLUSION_CONSTRAINT in text:
                constraint_name = TEACHER_EXCLUSION_CONSTRAINT
            elif LEARNER_EXCLUSION_CONSTRAINT in text:
                constraint_name = LEARNER_EXCLUSION_CONSTRAINT

        if constraint_name == TEACHER_EXCLUSION_CONSTRAINT:
            return "teacher"
        if constraint_name == LEARNER_EXCLUSION_CONSTRAINT:
            return "learner"
        return None

    def _validate_references(self, data: SessionCreate) -> None:
        """Raise NotFound for the first missing entity, then check the offering."""
        for kind, entity_id in (
            (EntityKind.TEACHER, data.teacher_id),
            (EntityKind.LEARNER, data.learner_id),
            (EntityKind.SKILL, data.skill_id),
        ):
            if not self.directory_repository.exists(kind, entity_id):
                raise EntityNotFoundException(kind.value, entity_id)

        if not self.directory_repository.teacher_offers_skill(data.teacher_id, data.skill_id):
            raise OfferingMissingException(data.teacher_id, data.skill_id)

    @BaseService.measure_operation("create_session")
    def create_session(self, data: SessionCreate) -> SkillSession:
        """
        Create a PENDING session.

        Args:
            data: Validated booking request

        Returns:
            The created session with teacher, learner and skill loaded

        Raises:
            InvalidIntervalException: If end_time <= start_time
            EntityNotFoundException: If teacher, learner or skill is missing
            OfferingMissingException: If the teacher doesn't teach the skill
            SchedulingConflictException: If either participant is busy
            SchedulingBusyException: If a participant lock is not acquired in time
        """
        start_time = ensure_utc(data.start_time)
        end_time = ensure_utc(data.end_time)
        interval = Interval(start=start_time, end=end_time)
        if interval.is_empty:
            raise InvalidIntervalException(start_time, end_time)

        participants = Participants(teacher_id=data.teacher_id, learner_id=data.learner_id)
        conflict_details = {
            "teacher_id": data.teacher_id,
            "learner_id": data.learner_id,
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
        }

        with participant_locks(data.teacher_id, data.learner_id):
            try:
                with self.repository.transaction():
                    self.repository.lock_participants((data.teacher_id, data.learner_id))
                    self._validate_references(data)

                    conflict = self.conflict_detector.find_conflict(participants, interval)
                    if conflict is not None:
                        scope = conflict_scope(conflict, participants)
                        raise SchedulingConflictException(
                            TEACHER_CONFLICT_MESSAGE if scope == "teacher" else LEARNER_CONFLICT_MESSAGE,
                            details={
                                **conflict_details,
                                "conflict_scope": scope,
                                "conflicting_session_id": conflict.id,
                            },
                        )

                    session = self.repository.create(
                        teacher_id=data.teacher_id,
                        learner_id=data.learner_id,
                        skill_id=data.skill_id,
                        start_time=start_time,
                        end_time=end_time,
                        status=INITIAL_STATUS.value,
                        notes=data.notes,
                    )
                    session_id = session.id
            except IntegrityError as exc:
                scope = self._resolve_integrity_conflict(exc)
                if scope is None:
                    raise
                prometheus_metrics.record_scheduling_conflict("store")
                raise SchedulingConflictException(
                    TEACHER_CONFLICT_MESSAGE if scope == "teacher" else LEARNER_CONFLICT_MESSAGE,
                    details={**conflict_details, "conflict_scope": scope},
                ) from exc
            except OperationalError as exc:
                if self._is_deadlock_error(exc):
                    raise SchedulingConflictException(CONFLICT_MESSAGE, details=conflict_details) from exc
                raise

        self.log_operation("create_session", session_id=session_id)
        return self._reload(session_id)

    @BaseService.measure_operation("update_session")
    def update_session(self, session_id: str, patch: SessionUpdate) -> SkillSession:
        """
        Apply a status transition and/or a notes change.

        Raises:
            EntityNotFoundException: If the session does not exist
            InvalidTransitionException: If the status change is not allowed
        """
        with self.repository.transaction():
            session = self.repository.get_for_update(session_id)
            if session is None:
                raise EntityNotFoundException(EntityKind.SESSION.value, session_id)

            if patch.has_status:
                apply_transition(session, SessionStatus(patch.status))
            if patch.has_notes:
                session.notes = patch.notes

            self.db.flush()

        self.log_operation(
            "update_session",
            session_id=session_id,
            status=session.status,
            notes_changed=patch.has_notes,
        )
        return self._reload(session_id)

    def get_session(self, session_id: str) -> SkillSession:
        """Load a session with details or raise NotFound."""
        session = self.repository.get_with_details(session_id)
        if session is None:
            raise EntityNotFoundException(EntityKind.SESSION.value, session_id)
        return session

    def _reload(self, session_id: str) -> SkillSession:
        self.db.expire_all()
        return self.get_session(session_id)
