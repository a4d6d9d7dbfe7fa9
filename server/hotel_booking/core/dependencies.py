"""FastAPI dependencies for database sessions and bearer-token authentication."""

import logging
from typing import Optional

from fastapi import Depends, Header
import jwt
from jwt import PyJWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .database import get_db
from .exceptions import AuthenticationError
from ..models.user import UserSession

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


def _extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthenticationError(detail="Authorization header missing")

    parts = authorization.split()
    if len(parts) != 2:
        raise AuthenticationError(detail="Invalid authorization header format")

    scheme, token = parts
    if scheme.lower() != "bearer":
        raise AuthenticationError(detail="Invalid authentication scheme")

    return token


def _decode_user_id(token: str) -> int:
    """Verify the token signature and return its ``userId`` claim."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[TOKEN_ALGORITHM])
    except PyJWTError as e:
        raise AuthenticationError(detail=f"Token validation failed: {e}") from e

    user_id = payload.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise AuthenticationError(detail="Invalid token payload")

    return user_id


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> int:
    """
    Authentication dependency resolving a bearer token to a user ID.

    The token must be a valid HS256 JWT carrying a ``userId`` claim, and a
    session row must still hold it; signing out deletes the session, which
    revokes the token even before it expires.

    Raises:
        AuthenticationError: If the header is missing or malformed, the token
            does not verify, or no session holds the token
    """
    token = _extract_bearer_token(authorization)
    user_id = _decode_user_id(token)

    stmt = select(UserSession.id).where(
        UserSession.token == token,
        UserSession.user_id == user_id
    )
    result = await db.execute(stmt)
    if result.first() is None:
        logger.info("Rejected token without active session", extra={"user_id": user_id})
        raise AuthenticationError(detail="No active session for token")

    return user_id


# Reusable dependency markers
CurrentUserId = Depends(get_current_user_id)
DatabaseSession = Depends(get_db)
