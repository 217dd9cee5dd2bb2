"""
Error taxonomy for the credential lifecycle.

Every error carries the HTTP status it maps to and a user-facing message.
``api.middleware`` turns them into ``{"message": ...}`` JSON responses.
"""

from __future__ import annotations

from fastapi import status


class AuthError(Exception):
    """Base class for all expected auth / signup failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AuthError):
    """A required field is missing or empty."""


class DuplicateKeyError(AuthError):
    """Username or email already taken."""


class UserNotFoundError(AuthError):
    """No user matches the lookup key."""


class InvalidCredentialsError(AuthError):
    pass


class UnauthorizedError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN


class UnsupportedMediaTypeError(AuthError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


class MalformedHashError(Exception):
    """The stored password hash is not a valid bcrypt hash."""
