"""
Token handling for the scheduling API.

Identity is owned by an external provider; this module only encodes and
decodes the bearer tokens it issues. Payload: ``{"userId", "role", "exp"}``.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError

from .core.config import settings
from .principal import AnyPrincipal, principal_from_claims

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: The data to encode in the token (``userId`` and ``role``)
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _secret_value(settings.jwt_secret), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT access token (signature and expiry)."""
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.jwt_secret),
        algorithms=[settings.jwt_algorithm],
    )
    return cast(Dict[str, Any], payload_raw)


async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme_optional),
) -> AnyPrincipal:
    """
    Dependency to get the authenticated principal from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    invalid_credentials = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise not_authenticated

    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.error(f"JWT validation error: {str(e)}")
        raise invalid_credentials

    user_id = payload.get("userId")
    role = payload.get("role")
    if not isinstance(user_id, str) or not user_id or not isinstance(role, str):
        logger.warning("Token payload missing 'userId' or 'role'")
        raise invalid_credentials

    try:
        principal = principal_from_claims(user_id, role)
    except ValueError:
        logger.warning(f"Token carries unknown role: {role}")
        raise invalid_credentials

    logger.debug(f"Successfully validated token for {principal.role.value} {user_id}")
    return principal
