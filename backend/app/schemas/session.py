# backend/app/schemas/session.py
"""
Session schemas for the SkillSwap platform.

Request bodies use camelCase on the wire (teacherId, startTime, ...).
Interval ordering is checked by the session store, not here, so an inverted
interval surfaces as INVALID_INTERVAL rather than a request validation error.
"""

from typing import Optional

from pydantic import Field

from ..core.constants import MAX_NOTES_LENGTH
from ..models.session import SessionStatus
from ._strict_base import StrictRequestModel
from .base import StandardizedModel, UTCDateTime


class SessionCreate(StrictRequestModel):
    """Book a session between a teacher and a learner for one skill."""

    teacher_id: str = Field(..., alias="teacherId", min_length=1, description="Teacher to book")
    learner_id: str = Field(..., alias="learnerId", min_length=1, description="Learner attending")
    skill_id: str = Field(..., alias="skillId", min_length=1, description="Skill being taught")
    start_time: UTCDateTime = Field(..., alias="startTime", description="Session start (inclusive)")
    end_time: UTCDateTime = Field(..., alias="endTime", description="Session end (exclusive)")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Optional notes")


class SessionUpdate(StrictRequestModel):
    """
    Partial session update.

    Only fields present in the request body are applied; an explicit
    ``"notes": null`` clears the notes.
    """

    status: Optional[SessionStatus] = Field(None, description="Target lifecycle status")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Replacement notes")

    @property
    def has_status(self) -> bool:
        return "status" in self.model_fields_set and self.status is not None

    @property
    def has_notes(self) -> bool:
        return "notes" in self.model_fields_set


class ParticipantSummary(StandardizedModel):
    """Teacher or learner as embedded in a session."""

    id: str
    name: str
    email: Optional[str] = None


class SkillSummary(StandardizedModel):
    """Skill as embedded in a session."""

    id: str
    name: str


class SessionResponse(StandardizedModel):
    """Session with its participants and skill."""

    id: str
    teacher_id: str = Field(..., alias="teacherId")
    learner_id: str = Field(..., alias="learnerId")
    skill_id: str = Field(..., alias="skillId")
    start_time: UTCDateTime = Field(..., alias="startTime")
    end_time: UTCDateTime = Field(..., alias="endTime")
    status: SessionStatus
    notes: Optional[str] = None
    has_review: bool = Field(False, alias="hasReview")
    created_at: Optional[UTCDateTime] = Field(None, alias="createdAt")
    updated_at: Optional[UTCDateTime] = Field(None, alias="updatedAt")
    confirmed_at: Optional[UTCDateTime] = Field(None, alias="confirmedAt")
    completed_at: Optional[UTCDateTime] = Field(None, alias="completedAt")

    teacher: Optional[ParticipantSummary] = None
    learner: Optional[ParticipantSummary] = None
    skill: Optional[SkillSummary] = None


class CalendarFilter(StrictRequestModel):
    """Optional window for calendar views; omitted bounds are unbounded."""

    start: Optional[UTCDateTime] = None
    end: Optional[UTCDateTime] = None
