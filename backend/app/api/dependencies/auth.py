# backend/app/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Routes declare which principal variants may call them with
``require_roles(...)``; the dependency yields the typed principal.
"""

import logging
from typing import Awaitable, Callable

from fastapi import Depends, HTTPException, status

from ...auth import get_current_principal
from ...core.enums import RoleName
from ...principal import AnyPrincipal

logger = logging.getLogger(__name__)


def require_roles(*roles: RoleName) -> Callable[..., Awaitable[AnyPrincipal]]:
    """
    Build a dependency that admits only the given roles.

    Missing or invalid tokens yield 401; an authenticated caller with a role
    outside ``roles`` yields 403.
    """
    allowed = frozenset(roles)

    async def verify_role(
        principal: AnyPrincipal = Depends(get_current_principal),
    ) -> AnyPrincipal:
        if principal.role not in allowed:
            logger.info(
                "role_denied",
                extra={"user_id": principal.id, "role": principal.role.value},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(sorted(role.value for role in allowed))}",
            )
        return principal

    return verify_role


require_teacher = require_roles(RoleName.TEACHER)
require_learner = require_roles(RoleName.LEARNER)
require_admin = require_roles(RoleName.ADMIN)
require_booker = require_roles(RoleName.LEARNER, RoleName.ADMIN)
