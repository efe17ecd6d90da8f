# backend/app/schemas/calendar.py
"""Calendar event schemas (FullCalendar-compatible shape)."""

from typing import Optional

from pydantic import Field

from ..models.session import SessionStatus
from .base import StandardizedModel, UTCDateTime


class CalendarEventProps(StandardizedModel):
    """Extra data carried by an event; participant fields depend on the view."""

    status: SessionStatus
    teacher_id: Optional[str] = Field(None, alias="teacherId")
    teacher_name: Optional[str] = Field(None, alias="teacherName")
    learner_id: Optional[str] = Field(None, alias="learnerId")
    learner_name: Optional[str] = Field(None, alias="learnerName")
    skill_id: str = Field(..., alias="skillId")
    skill_name: str = Field(..., alias="skillName")


class CalendarEvent(StandardizedModel):
    """One confirmed session rendered for a calendar."""

    id: str
    title: str
    start: UTCDateTime
    end: UTCDateTime
    all_day: bool = Field(False, alias="allDay")
    extended_props: CalendarEventProps = Field(..., alias="extendedProps")
