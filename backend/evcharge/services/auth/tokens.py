"""
Token creation with role claims
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from ...core.config import settings


def create_token_with_role(
    subject: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token with role claim.

    Args:
        subject: User id - used as JWT sub claim
        role: User role (user, admin)
        expires_delta: Optional expiration time delta

    Returns:
        JWT token string with role claim
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
