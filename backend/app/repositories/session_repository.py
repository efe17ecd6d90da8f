# backend/app/repositories/session_repository.py
"""
Session Repository for the SkillSwap platform.

Implements all data access operations for session management:
- Overlap queries used by the conflict detector
- Row and participant locking for atomic check-and-write
- Calendar source queries (CONFIRMED sessions, optional window)

All datetimes handed to this repository must already be normalized to UTC.
"""

from datetime import datetime
import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.session import ACTIVE_STATUSES, SessionStatus, SkillSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SessionRepository(BaseRepository[SkillSession]):
    """
    Repository for session data access.

    Write operations flush only; the service owns commit and rollback.
    """

    def __init__(self, db: Session):
        """Initialize with SkillSession model."""
        super().__init__(db, SkillSession)
        self.logger = logging.getLogger(__name__)

    def create(self, **kwargs: Any) -> SkillSession:
        """
        Insert a session and flush it.

        Integrity violations propagate unchanged so the store can tell an
        exclusion-constraint conflict apart from other failures.
        """
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    # Conflict queries

    def find_overlapping(
        self,
        start_time: datetime,
        end_time: datetime,
        teacher_id: Optional[str] = None,
        learner_id: Optional[str] = None,
        exclude_session_id: Optional[str] = None,
    ) -> Optional[SkillSession]:
        """
        Find one active session of either participant overlapping [start, end).

        Args:
            start_time: Interval start (inclusive)
            end_time: Interval end (exclusive)
            teacher_id: Match sessions taught by this teacher
            learner_id: Match sessions attended by this learner
            exclude_session_id: Session to leave out of the scan

        Returns:
            An arbitrary conflicting session, or None
        """
        participant_filters = []
        if teacher_id is not None:
            participant_filters.append(SkillSession.teacher_id == teacher_id)
        if learner_id is not None:
            participant_filters.append(SkillSession.learner_id == learner_id)
        if not participant_filters:
            return None

        try:
            query = self.db.query(SkillSession).filter(
                or_(*participant_filters),
                SkillSession.status.in_([status.value for status in ACTIVE_STATUSES]),
                # Half-open overlap: touching endpoints do not conflict
                SkillSession.start_time < end_time,
                SkillSession.end_time > start_time,
            )

            if exclude_session_id:
                query = query.filter(SkillSession.id != exclude_session_id)

            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking session overlap: {str(e)}")
            raise RepositoryException(f"Failed to check conflict: {str(e)}")

    # Locking

    def lock_participants(self, participant_ids: Iterable[str]) -> None:
        """
        Take transaction-scoped advisory locks for each participant.

        PostgreSQL only; other dialects rely on the process-level locks.
        Keys are taken in sorted order.
        """
        if self.dialect_name != "postgresql":
            return
        try:
            for participant_id in sorted(set(participant_ids)):
                self.db.execute(
                    select(func.pg_advisory_xact_lock(func.hashtext(f"participant:{participant_id}")))
                )
        except SQLAlchemyError as e:
            self.logger.error(f"Error acquiring participant advisory locks: {str(e)}")
            raise RepositoryException(f"Failed to lock participants: {str(e)}")

    def get_for_update(self, session_id: str) -> Optional[SkillSession]:
        """
        Load a session row with a row-level lock (no-op lock on SQLite).

        Any copy already in the identity map is overwritten with the locked
        row's current values, so status checks see committed transitions.
        """
        try:
            return (
                self.db.query(SkillSession)
                .filter(SkillSession.id == session_id)
                .populate_existing()
                .with_for_update()
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock session: {str(e)}")

    def get_with_details(self, session_id: str) -> Optional[SkillSession]:
        """Load a session with teacher, learner, skill and review."""
        return self.get_by_id(session_id, load_relationships=True)

    # Calendar queries

    def get_confirmed_sessions(
        self,
        teacher_id: Optional[str] = None,
        learner_id: Optional[str] = None,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> List[SkillSession]:
        """
        Get CONFIRMED sessions for a calendar view.

        Args:
            teacher_id: Restrict to one teacher
            learner_id: Restrict to one learner
            window_start: Only sessions ending after this instant
            window_end: Only sessions starting before this instant

        Returns:
            Sessions ordered by start time
        """
        try:
            query = self._apply_eager_loading(self.db.query(SkillSession)).filter(
                SkillSession.status == SessionStatus.CONFIRMED.value
            )

            if teacher_id is not None:
                query = query.filter(SkillSession.teacher_id == teacher_id)
            if learner_id is not None:
                query = query.filter(SkillSession.learner_id == learner_id)
            if window_start is not None:
                query = query.filter(SkillSession.end_time > window_start)
            if window_end is not None:
                query = query.filter(SkillSession.start_time < window_end)

            return query.order_by(SkillSession.start_time, SkillSession.id).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting calendar sessions: {str(e)}")
            raise RepositoryException(f"Failed to get calendar sessions: {str(e)}")

    def _apply_eager_loading(self, query: Query) -> Query:
        """Load every relationship a response or calendar event needs."""
        return query.options(
            joinedload(SkillSession.teacher),
            joinedload(SkillSession.learner),
            joinedload(SkillSession.skill),
            joinedload(SkillSession.review),
        )
