# backend/app/services/scheduling_service.py
"""
Scheduling Service for the SkillSwap platform.

Entry point for the scheduling core. Applies principal rules, delegates
writes to the SessionStore and reads to the CalendarProjector, and publishes
session lifecycle events once a change is committed.

Principal rules:
- A learner may only book sessions for themself; admins may book for anyone.
- A teacher may only update sessions they teach; admins may update any.
- Calls without a principal are trusted internal calls.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException
from ..events.session_events import (
    emit_session_completed,
    emit_session_confirmed,
    emit_session_created,
)
from ..models.session import SessionStatus, SkillSession
from ..principal import AdminPrincipal, AnyPrincipal, LearnerPrincipal, TeacherPrincipal
from ..schemas.calendar import CalendarEvent
from ..schemas.session import SessionCreate, SessionUpdate
from .base import BaseService
from .calendar_projector import (
    AdminScope,
    CalendarProjector,
    CalendarScope,
    LearnerScope,
    TeacherScope,
)
from .session_store import SessionStore

logger = logging.getLogger(__name__)


class SchedulingService(BaseService):
    """
    Orchestrates session booking, lifecycle updates and calendar views.
    """

    def __init__(
        self,
        db: Session,
        store: Optional[SessionStore] = None,
        projector: Optional[CalendarProjector] = None,
    ):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.store = store or SessionStore(db)
        self.projector = projector or CalendarProjector(db, self.store.repository)

    @BaseService.measure_operation("schedule_session")
    def create_session(
        self,
        data: SessionCreate,
        acting_principal: Optional[AnyPrincipal] = None,
    ) -> SkillSession:
        """
        Book a new PENDING session.

        Args:
            data: Booking request
            acting_principal: Caller; None for trusted internal calls

        Raises:
            ForbiddenException: If the caller may not book for this learner
            plus every error of SessionStore.create_session
        """
        if isinstance(acting_principal, TeacherPrincipal):
            raise ForbiddenException("Teachers cannot book sessions", code="FORBIDDEN")
        if isinstance(acting_principal, LearnerPrincipal) and acting_principal.id != data.learner_id:
            raise ForbiddenException("Learners can only book sessions for themselves", code="FORBIDDEN")

        session = self.store.create_session(data)

        emit_session_created(
            session_id=session.id,
            teacher_id=session.teacher_id,
            learner_id=session.learner_id,
            skill_id=session.skill_id,
            start_time=session.start_time,
            end_time=session.end_time,
        )
        return session

    @BaseService.measure_operation("change_session")
    def update_session(
        self,
        session_id: str,
        patch: SessionUpdate,
        acting_principal: Optional[AnyPrincipal] = None,
    ) -> SkillSession:
        """
        Change a session's status and/or notes.

        Notes-only patches never touch the lifecycle machine.

        Raises:
            EntityNotFoundException: If the session does not exist
            ForbiddenException: If the caller does not teach this session
            InvalidTransitionException: If the status change is not allowed
        """
        if acting_principal is not None and not isinstance(acting_principal, AdminPrincipal):
            existing = self.store.get_session(session_id)
            if not isinstance(acting_principal, TeacherPrincipal) or existing.teacher_id != acting_principal.id:
                raise ForbiddenException(
                    "Only the session's teacher can update it",
                    code="FORBIDDEN",
                    details={"session_id": session_id},
                )

        session = self.store.update_session(session_id, patch)

        if patch.has_status:
            target = SessionStatus(patch.status)
            if target == SessionStatus.CONFIRMED:
                emit_session_confirmed(
                    session_id=session.id,
                    teacher_id=session.teacher_id,
                    learner_id=session.learner_id,
                    skill_id=session.skill_id,
                    confirmed_at=session.confirmed_at,
                )
            elif target == SessionStatus.COMPLETED:
                emit_session_completed(
                    session_id=session.id,
                    teacher_id=session.teacher_id,
                    learner_id=session.learner_id,
                    skill_id=session.skill_id,
                    completed_at=session.completed_at,
                )
        return session

    def get_calendar(
        self,
        scope: CalendarScope,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        return self.projector.get_calendar(scope, window_start, window_end)

    def get_teacher_calendar(
        self,
        teacher_id: str,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """CONFIRMED sessions taught by ``teacher_id``."""
        return self.get_calendar(TeacherScope(teacher_id=teacher_id), window_start, window_end)

    def get_learner_calendar(
        self,
        learner_id: str,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """CONFIRMED sessions attended by ``learner_id``."""
        return self.get_calendar(LearnerScope(learner_id=learner_id), window_start, window_end)

    def get_admin_calendar(
        self,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """Every CONFIRMED session on the platform."""
        return self.get_calendar(AdminScope(), window_start, window_end)
