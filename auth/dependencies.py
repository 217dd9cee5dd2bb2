"""
FastAPI dependencies for authentication.

Provides ``get_auth_service`` (per-request service wired from ``app.state``)
and ``get_current_user``, the access guard used by protected routes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import ForbiddenError, UnauthorizedError
from auth.jwt import InvalidToken
from auth.service import AuthService
from database.repository import SqlUserRepository
from database.session import get_db_session
from utils.schemas import AuthenticatedUser

logger = logging.getLogger(__name__)


async def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> AuthService:
    state = request.app.state
    return AuthService(
        users=SqlUserRepository(session),
        hasher=state.hasher,
        tokens=state.tokens,
        media=state.media,
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of ``Bearer <token>``, or None when absent."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> AuthenticatedUser:
    """
    Verify the Bearer token and return the authenticated identity.

    No token → 401; a malformed, tampered or expired token → 403.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise UnauthorizedError("Access Denied. No Token Provided.")

    result = request.app.state.tokens.verify(token)
    if isinstance(result, InvalidToken):
        logger.info("Rejected token on %s: %s", request.url.path, result.reason)
        raise ForbiddenError("Invalid Token.")

    user = AuthenticatedUser(
        subject_id=result.claims.subject_id,
        username=result.claims.username,
    )
    request.state.user = user
    return user
