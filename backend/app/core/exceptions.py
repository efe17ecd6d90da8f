# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the SkillSwap scheduling engine.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to HTTPException using the class status code."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with concurrent work."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


# Specific scheduling exceptions


class EntityNotFoundException(NotFoundException):
    """Raised when a referenced teacher, learner, skill or session is absent."""

    def __init__(self, kind: str, entity_id: Optional[str] = None):
        super().__init__(
            message=f"{kind.capitalize()} not found",
            code="NOT_FOUND",
            details={"kind": kind, "id": entity_id} if entity_id else {"kind": kind},
        )
        self.kind = kind


class OfferingMissingException(ValidationException):
    """Raised when the teacher has no registered offering for the skill."""

    def __init__(self, teacher_id: str, skill_id: str):
        super().__init__(
            message="Teacher doesn't teach this skill",
            code="OFFERING_MISSING",
            details={"teacher_id": teacher_id, "skill_id": skill_id},
        )


class SchedulingConflictException(ValidationException):
    """Raised when a proposed interval overlaps an active session of either participant."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "Time slot conflicts with existing session",
            code="SCHEDULING_CONFLICT",
            details=details or {},
        )


class InvalidTransitionException(ValidationException):
    """Raised when a status change is not an edge of the lifecycle."""

    def __init__(self, from_status: str, to_status: str):
        super().__init__(
            message=f"Cannot transition from {from_status} to {to_status}",
            code="INVALID_TRANSITION",
            details={"from": from_status, "to": to_status},
        )
        self.from_status = from_status
        self.to_status = to_status


class InvalidIntervalException(ValidationException):
    """Raised when a session interval does not end after it starts."""

    def __init__(self, start: Any, end: Any):
        super().__init__(
            message="Session end time must be after start time",
            code="INVALID_INTERVAL",
            details={"start_time": str(start), "end_time": str(end)},
        )


class SchedulingBusyException(ConflictException):
    """Raised when a participant lock could not be acquired in time."""

    def __init__(self, keys: Any):
        super().__init__(
            message="Another booking for this participant is in progress. Please retry.",
            code="SCHEDULING_BUSY",
            details={"locks": list(keys)},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
