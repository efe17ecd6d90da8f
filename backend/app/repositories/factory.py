# backend/app/repositories/factory.py
"""
Repository Factory for the SkillSwap platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .directory_repository import DirectoryRepository
    from .session_repository import SessionRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_directory_repository(db: Session) -> "DirectoryRepository":
        """Create repository for teacher/learner/skill lookups."""
        from .directory_repository import DirectoryRepository

        return DirectoryRepository(db)

    @staticmethod
    def create_session_repository(db: Session) -> "SessionRepository":
        """Create repository for session operations."""
        from .session_repository import SessionRepository

        return SessionRepository(db)
