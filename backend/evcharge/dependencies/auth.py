"""
Authentication dependencies

Identity is issued by the external auth service as an HS256 JWT whose
`sub` claim is the user id and `role` claim the user's role.
"""
from dataclasses import dataclass

from fastapi import HTTPException, Request, status
from jose import jwt, JWTError

from ..core.config import settings


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    role: str = "user"


def get_current_user(request: Request) -> AuthenticatedUser:
    """
    Extract the caller's identity from the Authorization header.

    Raises:
        HTTPException: If token is missing, invalid, expired or has no subject
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header"
        )

    token = auth_header[7:]  # Remove "Bearer " prefix

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    # Expose to LoggingMiddleware
    request.state.user_id = user_id
    return AuthenticatedUser(id=str(user_id), role=payload.get("role") or "user")
