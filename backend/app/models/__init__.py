"""
Database models for the SkillSwap platform.

The models are organized by functionality:
- Participants (teachers and learners)
- Skill catalog and teacher offerings
- Sessions (the scheduling core)
- Reviews (read-only here, owned by the review subsystem)
"""

from .review import Review
from .session import ACTIVE_STATUSES, SessionStatus, SkillSession
from .skill import Skill, TeacherSkill
from .user import Learner, Teacher

__all__ = [
    "Teacher",
    "Learner",
    "Skill",
    "TeacherSkill",
    "SkillSession",
    "SessionStatus",
    "ACTIVE_STATUSES",
    "Review",
]
