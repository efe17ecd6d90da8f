"""Principal abstractions for authenticated scheduling callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, Union, runtime_checkable

from .core.enums import RoleName


@runtime_checkable
class Principal(Protocol):
    """Represents the authenticated entity making a request."""

    @property
    def id(self) -> str:
        """Unique identifier for audit trails."""
        ...

    @property
    def role(self) -> RoleName:
        ...


@dataclass(frozen=True)
class TeacherPrincipal:
    """Caller acting as a teacher; ``user_id`` is a teachers.id."""

    user_id: str
    kind: Literal["teacher"] = "teacher"

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def role(self) -> RoleName:
        return RoleName.TEACHER


@dataclass(frozen=True)
class LearnerPrincipal:
    """Caller acting as a learner; ``user_id`` is a learners.id."""

    user_id: str
    kind: Literal["learner"] = "learner"

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def role(self) -> RoleName:
        return RoleName.LEARNER


@dataclass(frozen=True)
class AdminPrincipal:
    """Platform administrator."""

    user_id: str
    kind: Literal["admin"] = "admin"

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def role(self) -> RoleName:
        return RoleName.ADMIN


AnyPrincipal = Union[TeacherPrincipal, LearnerPrincipal, AdminPrincipal]


def principal_from_claims(user_id: str, role: str) -> AnyPrincipal:
    """
    Build the principal variant for a token's claims.

    Raises:
        ValueError: If the role is unknown
    """
    role_name = RoleName(str(role).upper())
    if role_name == RoleName.TEACHER:
        return TeacherPrincipal(user_id=user_id)
    if role_name == RoleName.LEARNER:
        return LearnerPrincipal(user_id=user_id)
    return AdminPrincipal(user_id=user_id)
