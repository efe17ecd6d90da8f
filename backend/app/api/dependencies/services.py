# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.scheduling_service import SchedulingService
from .database import get_db

logger = logging.getLogger(__name__)


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """
    Get scheduling service instance bound to the request's database session.

    Args:
        db: Database session

    Returns:
        SchedulingService instance
    """
    return SchedulingService(db)
