# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import require_admin, require_booker, require_learner, require_roles, require_teacher
from .database import get_db
from .services import get_scheduling_service

__all__ = [
    # Auth
    "require_roles",
    "require_teacher",
    "require_learner",
    "require_admin",
    "require_booker",
    # Database
    "get_db",
    # Services
    "get_scheduling_service",
]
