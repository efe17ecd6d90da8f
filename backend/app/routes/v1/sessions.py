# backend/app/routes/v1/sessions.py
"""
Session scheduling routes - API v1

Versioned session endpoints under /api/v1/sessions.
All business logic delegated to SchedulingService.

Endpoints:
    GET /teacher/calendar - Confirmed sessions of the calling teacher
    GET /learner/calendar - Confirmed sessions of the calling learner
    GET /calendar - Every confirmed session (admin only)
    POST / - Book a session (learner for themself, or admin)
    PATCH /{session_id} - Change status and/or notes (teacher of the session)
"""

import asyncio
from datetime import datetime
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from ...api.dependencies import (
    get_scheduling_service,
    require_admin,
    require_booker,
    require_learner,
    require_teacher,
)
from ...core.constants import ULID_PATH_PATTERN
from ...core.exceptions import DomainException
from ...principal import AnyPrincipal
from ...schemas.calendar import CalendarEvent
from ...schemas.session import CalendarFilter, SessionCreate, SessionResponse, SessionUpdate
from ...services.scheduling_service import SchedulingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["sessions-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _calendar_filter(
    start: Optional[datetime] = Query(None, description="Only events ending after this instant"),
    end: Optional[datetime] = Query(None, description="Only events starting before this instant"),
) -> CalendarFilter:
    return CalendarFilter(start=start, end=end)


# ============================================================================
# SECTION 1: Calendar views (static paths)
# ============================================================================


@router.get(
    "/teacher/calendar",
    response_model=List[CalendarEvent],
    response_model_exclude_none=True,
)
async def get_teacher_calendar(
    window: CalendarFilter = Depends(_calendar_filter),
    principal: AnyPrincipal = Depends(require_teacher),
    scheduling_service: SchedulingService = Depends(get_scheduling_service),
) -> List[CalendarEvent]:
    """Confirmed sessions taught by the caller."""
    try:
        return await asyncio.to_thread(
            scheduling_service.get_teacher_calendar, principal.id, window.start, window.end
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/learner/calendar",
    response_model=List[CalendarEvent],
    response_model_exclude_none=True,
)
async def get_learner_calendar(
    window: CalendarFilter = Depends(_calendar_filter),
    principal: AnyPrincipal = Depends(require_learner),
    scheduling_service: SchedulingService = Depends(get_scheduling_service),
) -> List[CalendarEvent]:
    """Confirmed sessions attended by the caller."""
    try:
        return await asyncio.to_thread(
            scheduling_service.get_learner_calendar, principal.id, window.start, window.end
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/calendar",
    response_model=List[CalendarEvent],
    response_model_exclude_none=True,
)
async def get_admin_calendar(
    window: CalendarFilter = Depends(_calendar_filter),
    principal: AnyPrincipal = Depends(require_admin),
    scheduling_service: SchedulingService = Depends(get_scheduling_service),
) -> List[CalendarEvent]:
    """Every confirmed session on the platform."""
    try:
        return await asyncio.to_thread(
            scheduling_service.get_admin_calendar, window.start, window.end
        )
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Session writes
# ============================================================================


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    session_data: SessionCreate = Body(...),
    principal: AnyPrincipal = Depends(require_booker),
    scheduling_service: SchedulingService = Depends(get_scheduling_service),
) -> SessionResponse:
    """
    Book a session.

    The session starts PENDING. Fails when the teacher doesn't offer the
    skill or when either participant already has an active session that
    overlaps the requested interval.
    """

    def _create() -> SessionResponse:
        session = scheduling_service.create_session(session_data, acting_principal=principal)
        return SessionResponse.model_validate(session)

    try:
        return await asyncio.to_thread(_create)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch(
    "/{session_id}",
    response_model=SessionResponse,
)
async def update_session(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    update_data: SessionUpdate = Body(...),
    principal: AnyPrincipal = Depends(require_teacher),
    scheduling_service: SchedulingService = Depends(get_scheduling_service),
) -> SessionResponse:
    """
    Change a session's status and/or notes.

    Status follows PENDING -> CONFIRMED -> COMPLETED; notes may change at
    any time.
    """

    def _update() -> SessionResponse:
        session = scheduling_service.update_session(
            session_id, update_data, acting_principal=principal
        )
        return SessionResponse.model_validate(session)

    try:
        return await asyncio.to_thread(_update)
    except DomainException as e:
        handle_domain_exception(e)
