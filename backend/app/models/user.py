# backend/app/models/user.py
"""
Participant models for the SkillSwap platform.

Teachers and learners are directory records owned by the account system.
The scheduling core only reads them: existence checks at booking time and
display names for calendar projections.

Classes:
    Teacher: A user who offers skills and hosts sessions
    Learner: A user who books sessions
"""

import logging

from sqlalchemy import Column, DateTime, Float, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class Teacher(Base):
    """
    Teacher profile.

    Attributes:
        id: ULID primary key (matches the identity provider's userId)
        name: Display name shown on learner and admin calendars
        email: Contact email
        bio: Optional free text
        rating: Average review rating, maintained by the review subsystem

    Relationships:
        offerings: Skills this teacher has registered (TeacherSkill)
        sessions: Sessions hosted by this teacher
    """

    __tablename__ = "teachers"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    bio = Column(Text, nullable=True)
    rating = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    offerings = relationship("TeacherSkill", back_populates="teacher", cascade="all, delete-orphan")
    sessions = relationship("SkillSession", back_populates="teacher", foreign_keys="SkillSession.teacher_id")

    def __repr__(self) -> str:
        return f"<Teacher {self.id}: {self.name}>"


class Learner(Base):
    """
    Learner profile.

    Attributes:
        id: ULID primary key (matches the identity provider's userId)
        name: Display name shown on teacher and admin calendars
        email: Contact email
    """

    __tablename__ = "learners"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    sessions = relationship("SkillSession", back_populates="learner", foreign_keys="SkillSession.learner_id")

    def __repr__(self) -> str:
        return f"<Learner {self.id}: {self.name}>"
