# backend/app/models/review.py
"""
Review model.

Reviews belong to the review subsystem. They are mapped here so the
scheduling core can tell whether a completed session already carries one.

Design notes:
- One review per session via DB unique constraint
- Only COMPLETED sessions are reviewable (enforced by the review subsystem)
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Review(Base):
    """Per-session review submitted by a learner."""

    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))

    session_id = Column(String(26), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    teacher_id = Column(String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    learner_id = Column(String(26), ForeignKey("learners.id", ondelete="CASCADE"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    session = relationship("SkillSession", back_populates="review")

    __table_args__ = (
        UniqueConstraint("session_id", name="uq_reviews_session"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )
