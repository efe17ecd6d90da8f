# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the SkillSwap platform.

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- IRepository: Interface defining required methods for all repositories
- RepositoryFactory: Factory for creating repository instances
- DirectoryRepository: Read-only teacher/learner/skill/offering lookups
- SessionRepository: Session persistence, overlap and calendar queries

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_session_repository(db)
    conflict = repository.find_overlapping(start, end, teacher_id=teacher_id)
"""

from .base_repository import BaseRepository, IRepository
from .directory_repository import DirectoryRepository
from .factory import RepositoryFactory
from .session_repository import SessionRepository

__all__ = [
    "BaseRepository",
    "IRepository",
    "RepositoryFactory",
    "DirectoryRepository",
    "SessionRepository",
]
