# backend/app/core/enums.py
"""
Core enums for the SkillSwap platform.

This module contains enumeration types used throughout the application
for type safety and consistency.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Roles carried by identity-provider tokens.

    The scheduling core never derives behaviour from a free-form role string;
    these values are parsed once into a principal variant.
    """

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    LEARNER = "LEARNER"


class EntityKind(str, Enum):
    """Directory entity kinds that the scheduling core looks up."""

    TEACHER = "teacher"
    LEARNER = "learner"
    SKILL = "skill"
    SESSION = "session"
