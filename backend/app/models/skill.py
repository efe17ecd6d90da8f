# backend/app/models/skill.py
"""
Skill catalog and teacher offerings.

A Skill is a catalog entry ("Guitar", "Spanish"). A TeacherSkill row is an
offering: the assertion that a teacher teaches a skill. Sessions can only be
booked for a skill the teacher offers at booking time.
"""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class Skill(Base):
    """Catalog entry for a teachable skill."""

    __tablename__ = "skills"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    offerings = relationship("TeacherSkill", back_populates="skill", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Skill {self.id}: {self.name}>"


class TeacherSkill(Base):
    """Offering: links a teacher to a skill they teach."""

    __tablename__ = "teacher_skills"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    skill_id = Column(String(26), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    teacher = relationship("Teacher", back_populates="offerings")
    skill = relationship("Skill", back_populates="offerings")

    __table_args__ = (
        UniqueConstraint("teacher_id", "skill_id", name="uq_teacher_skills_teacher_skill"),
    )

    def __repr__(self) -> str:
        return f"<TeacherSkill teacher={self.teacher_id} skill={self.skill_id}>"
