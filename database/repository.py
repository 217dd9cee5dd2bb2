"""
User repository — the Credential Store.

Persistence mechanics live here; the auth service only sees the
``create / find_by_username / find_by_id`` interface and the DTOs from
``utils.schemas``. Uniqueness of username and email is enforced by the
unique indexes on ``users``, not by a read-before-write check.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateKeyError, ValidationError
from database.models import User
from utils.schemas import NewUser, PublicUser, UserRecord

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("username", "email", "city", "mobile_number", "password_hash")


class UserRepository(Protocol):
    async def create(self, record: NewUser) -> str: ...

    async def find_by_username(self, username: str) -> Optional[UserRecord]: ...

    async def find_by_id(self, user_id: str) -> Optional[PublicUser]: ...


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


class SqlUserRepository:
    """``UserRepository`` backed by an SQLAlchemy ``AsyncSession``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, record: NewUser) -> str:
        """
        Insert and commit a new user, returning its id.

        Raises ``ValidationError`` for a missing required field and
        ``DuplicateKeyError`` when username or email is already taken.
        """
        missing = [name for name in _REQUIRED_FIELDS if not getattr(record, name)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        user = User(
            id=uuid.uuid4(),
            username=record.username,
            email=record.email,
            city=record.city,
            mobile_number=record.mobile_number,
            password_hash=record.password_hash,
            profile_picture=record.profile_picture,
        )
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Rejected duplicate user %s / %s: %s", record.username, record.email, exc.orig)
            raise DuplicateKeyError("Username or email already exists.") from exc

        return str(user.id)

    async def find_by_username(self, username: str) -> Optional[UserRecord]:
        result = await self._session.execute(
            select(User).where(User.username == username)
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return UserRecord(
            id=str(user.id),
            username=user.username,
            email=user.email,
            city=user.city,
            mobile_number=user.mobile_number,
            password_hash=user.password_hash,
            profile_picture=user.profile_picture,
        )

    async def find_by_id(self, user_id: str) -> Optional[PublicUser]:
        """Look up a user by id with the password hash stripped."""
        try:
            uid = _to_uuid(user_id)
        except ValueError:
            return None

        result = await self._session.execute(
            select(
                User.id,
                User.username,
                User.email,
                User.city,
                User.mobile_number,
                User.profile_picture,
            ).where(User.id == uid)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return PublicUser(
            id=str(row.id),
            username=row.username,
            email=row.email,
            city=row.city,
            mobile_number=row.mobile_number,
            profile_picture=row.profile_picture,
        )
