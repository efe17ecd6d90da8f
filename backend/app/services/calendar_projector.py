# backend/app/services/calendar_projector.py
"""
Calendar Projector for the SkillSwap platform.

Maps CONFIRMED sessions into calendar events for one of three views. The
mapping itself is pure; ``CalendarProjector`` only adds the source query.

View       | source filter        | title
-----------|----------------------|------------------------------------
teacher    | teacher_id == self   | "{skill} with {learner}"
learner    | learner_id == self   | "{skill} with {teacher}"
admin      | none                 | "{skill}: {teacher} - {learner}"
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Iterable, List, Literal, Optional, Union

from sqlalchemy.orm import Session

from ..models.session import SessionStatus, SkillSession
from ..repositories import RepositoryFactory
from ..repositories.session_repository import SessionRepository
from ..schemas.calendar import CalendarEvent, CalendarEventProps
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherScope:
    teacher_id: str
    kind: Literal["teacher"] = "teacher"


@dataclass(frozen=True)
class LearnerScope:
    learner_id: str
    kind: Literal["learner"] = "learner"


@dataclass(frozen=True)
class AdminScope:
    kind: Literal["admin"] = "admin"


CalendarScope = Union[TeacherScope, LearnerScope, AdminScope]


def project_session(session: SkillSession, scope: CalendarScope) -> CalendarEvent:
    """Render one session for the given view."""
    skill_name = session.skill.name
    teacher_name = session.teacher.name
    learner_name = session.learner.name

    props = {
        "status": SessionStatus(session.status),
        "skill_id": session.skill_id,
        "skill_name": skill_name,
    }

    if isinstance(scope, TeacherScope):
        title = f"{skill_name} with {learner_name}"
        props.update(learner_id=session.learner_id, learner_name=learner_name)
    elif isinstance(scope, LearnerScope):
        title = f"{skill_name} with {teacher_name}"
        props.update(teacher_id=session.teacher_id, teacher_name=teacher_name)
    else:
        title = f"{skill_name}: {teacher_name} - {learner_name}"
        props.update(
            teacher_id=session.teacher_id,
            teacher_name=teacher_name,
            learner_id=session.learner_id,
            learner_name=learner_name,
        )

    return CalendarEvent(
        id=session.id,
        title=title,
        start=session.start_time,
        end=session.end_time,
        all_day=False,
        extended_props=CalendarEventProps(**props),
    )


def project_sessions(sessions: Iterable[SkillSession], scope: CalendarScope) -> List[CalendarEvent]:
    """Project CONFIRMED sessions in input order; anything else is dropped."""
    return [
        project_session(session, scope)
        for session in sessions
        if session.status == SessionStatus.CONFIRMED.value
    ]


class CalendarProjector(BaseService):
    """Read-only calendar views; takes no locks."""

    def __init__(self, db: Session, repository: Optional[SessionRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_session_repository(db)

    @BaseService.measure_operation("get_calendar")
    def get_calendar(
        self,
        scope: CalendarScope,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """
        Get calendar events for a view.

        Args:
            scope: Whose calendar to render
            window_start: Only events ending after this instant
            window_end: Only events starting before this instant
        """
        sessions = self.repository.get_confirmed_sessions(
            teacher_id=scope.teacher_id if isinstance(scope, TeacherScope) else None,
            learner_id=scope.learner_id if isinstance(scope, LearnerScope) else None,
            window_start=window_start,
            window_end=window_end,
        )
        return project_sessions(sessions, scope)
