"""
Auth service — signup, login and profile lookup.

Orchestrates the credential store, the password hasher, the token service
and media intake. bcrypt work runs in a worker thread so it never blocks
the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from auth.errors import (
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from auth.jwt import TokenService
from auth.password import PasswordHasher
from database.repository import UserRepository
from media.intake import MediaStore
from utils.schemas import (
    ImageUpload,
    LoginResult,
    NewUser,
    PublicUser,
    SignupForm,
    SignupResult,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        media: MediaStore,
    ) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.media = media

    async def signup(self, form: SignupForm, image: Optional[ImageUpload] = None) -> SignupResult:
        """
        Register a new user. No token is issued; the user logs in separately.

        Raises ``ValidationError`` (missing field), ``UnsupportedMediaTypeError``
        (bad image) or ``DuplicateKeyError`` (username / email taken). A stored
        image is removed again when the record cannot be created.
        """
        if not all((form.username, form.email, form.city, form.mobile_number, form.password)):
            raise ValidationError("All fields are required.")

        password_hash = await asyncio.to_thread(self.hasher.hash, form.password)

        profile_picture = None
        if image is not None:
            profile_picture = await self.media.accept_async(
                image.data, image.filename, image.content_type
            )

        try:
            user_id = await self.users.create(
                NewUser(
                    username=form.username,
                    email=form.email,
                    city=form.city,
                    mobile_number=form.mobile_number,
                    password_hash=password_hash,
                    profile_picture=profile_picture,
                )
            )
        except Exception:
            if profile_picture:
                await asyncio.to_thread(self.media.discard, profile_picture)
            raise

        logger.info("Registered user %s (%s)", form.username, user_id)
        return SignupResult(user_id=user_id, username=form.username, profile_picture=profile_picture)

    async def login(self, username: Optional[str], password: Optional[str]) -> LoginResult:
        """Verify credentials and issue a session token."""
        if not username or not password:
            raise ValidationError("Username and Password are required.")

        user = await self.users.find_by_username(username)
        if user is None:
            logger.info("Login for unknown user %s", username)
            raise UserNotFoundError("User not found. Please register first.")

        valid = await asyncio.to_thread(self.hasher.verify, password, user.password_hash)
        if not valid:
            logger.info("Login with wrong password for %s", username)
            raise InvalidCredentialsError("Invalid username or password.")

        token = self.tokens.issue(user.id, user.username)
        logger.info("Login: %s (%s)", user.username, user.id)
        return LoginResult(token=token, user_id=user.id, username=user.username)

    async def profile(self, subject_id: str) -> PublicUser:
        """Return the user behind a verified token, without the password hash."""
        user = await self.users.find_by_id(subject_id)
        if user is None:
            raise UserNotFoundError("User not found.", status_code=404)
        return user
