# backend/app/repositories/directory_repository.py
"""
Directory Repository for the SkillSwap platform.

Read-only gateway to the directory records the scheduling core depends on:
teachers, learners, skills and teacher-skill offerings. Nothing here writes;
missing records are reported as ``False`` and the caller decides
which NotFound to raise.
"""

import logging
from typing import Dict, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import EntityKind
from ..core.exceptions import RepositoryException
from ..database import Base
from ..models.skill import Skill, TeacherSkill
from ..models.user import Learner, Teacher
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_KIND_MODELS: Dict[EntityKind, Type[Base]] = {
    EntityKind.TEACHER: Teacher,
    EntityKind.LEARNER: Learner,
    EntityKind.SKILL: Skill,
}


class DirectoryRepository(BaseRepository[TeacherSkill]):
    """
    Repository for directory lookups.

    Primary model is the offering; teacher, learner and skill lookups are
    side-effect-free reads on their own tables.
    """

    def __init__(self, db: Session):
        """Initialize with TeacherSkill model as primary."""
        super().__init__(db, TeacherSkill)
        self.logger = logging.getLogger(__name__)

    def exists(self, kind: EntityKind | str, id: str) -> bool:  # type: ignore[override]
        """
        Check whether a directory entity exists.

        Args:
            kind: teacher, learner or skill
            id: Entity id

        Returns:
            True if a row with that id exists
        """
        model = _KIND_MODELS.get(EntityKind(kind))
        if model is None:
            raise ValueError(f"Unsupported directory kind: {kind}")
        try:
            return self.db.query(model.id).filter(model.id == id).first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking {kind} existence: {str(e)}")
            raise RepositoryException(f"Failed to check {kind}: {str(e)}")

    def teacher_offers_skill(self, teacher_id: str, skill_id: str) -> bool:
        """Check whether the teacher has a registered offering for the skill."""
        try:
            return (
                self.db.query(TeacherSkill.id)
                .filter(TeacherSkill.teacher_id == teacher_id, TeacherSkill.skill_id == skill_id)
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking offering: {str(e)}")
            raise RepositoryException(f"Failed to check offering: {str(e)}")

