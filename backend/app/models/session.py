# backend/app/models/session.py
"""
Session model for the SkillSwap platform.

A session is a time-bound engagement between one teacher and one learner for
one skill. Participants and the skill are fixed at creation; afterwards only
the status (through the lifecycle machine) and the notes change.

Intervals are half-open: [start_time, end_time). Two active sessions of the
same participant may touch at an endpoint but never overlap.
"""

from enum import Enum
import logging
from typing import Any

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Session lifecycle statuses."""

    PENDING = "PENDING"  # Initial state, awaiting the teacher
    CONFIRMED = "CONFIRMED"  # Accepted by the teacher, shown on calendars
    COMPLETED = "COMPLETED"  # Terminal


ACTIVE_STATUSES = (SessionStatus.PENDING, SessionStatus.CONFIRMED)


class SkillSession(Base):
    """
    Bookable session between a teacher and a learner.

    Design: the row carries its own interval so conflict checks are a single
    indexed range query per participant.
    """

    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    # Participants and subject (immutable after creation)
    teacher_id = Column(String(26), ForeignKey("teachers.id"), nullable=False)
    learner_id = Column(String(26), ForeignKey("learners.id"), nullable=False)
    skill_id = Column(String(26), ForeignKey("skills.id"), nullable=False)

    # Interval
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    teacher = relationship("Teacher", back_populates="sessions", foreign_keys=[teacher_id])
    learner = relationship("Learner", back_populates="sessions", foreign_keys=[learner_id])
    skill = relationship("Skill")
    review = relationship("Review", back_populates="session", uselist=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'COMPLETED')",
            name="ck_sessions_status",
        ),
        CheckConstraint("start_time < end_time", name="ck_sessions_time_order"),
        Index("ix_sessions_teacher_interval", "teacher_id", "start_time", "end_time"),
        Index("ix_sessions_learner_interval", "learner_id", "start_time", "end_time"),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize as PENDING unless a status is given."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = SessionStatus.PENDING.value
        logger.info(
            f"Creating session for learner {self.learner_id} with teacher {self.teacher_id}"
        )

    def __repr__(self) -> str:
        return (
            f"<SkillSession {self.id}: teacher={self.teacher_id}, "
            f"learner={self.learner_id}, skill={self.skill_id}, "
            f"time={self.start_time}-{self.end_time}, status={self.status}>"
        )

    @property
    def is_active(self) -> bool:
        """Active sessions block their interval for both participants."""
        return self.status in {status.value for status in ACTIVE_STATUSES}

    @property
    def has_review(self) -> bool:
        return self.review is not None
