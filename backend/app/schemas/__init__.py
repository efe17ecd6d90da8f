# backend/app/schemas/__init__.py
"""
Pydantic schemas for the SkillSwap scheduling API.

Request bodies are strict (unknown fields rejected); responses are built
from ORM objects and serialized with camelCase aliases.
"""

from .calendar import CalendarEvent, CalendarEventProps
from .main_responses import HealthResponse
from .session import (
    CalendarFilter,
    ParticipantSummary,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
    SkillSummary,
)

__all__ = [
    # Sessions
    "SessionCreate",
    "SessionUpdate",
    "SessionResponse",
    "ParticipantSummary",
    "SkillSummary",
    # Calendar
    "CalendarFilter",
    "CalendarEvent",
    "CalendarEventProps",
    # Infrastructure
    "HealthResponse",
]
