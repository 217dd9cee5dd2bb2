"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

from auth.errors import MalformedHashError

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt hasher; ``rounds`` is the log2 cost factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted)."""
        return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Constant-time comparison against a bcrypt hash.

        Returns False on mismatch. Raises ``MalformedHashError`` when the
        stored hash cannot be parsed.
        """
        try:
            return bcrypt.checkpw(_secret(password), password_hash.encode())
        except (ValueError, TypeError) as exc:
            raise MalformedHashError(str(exc)) from exc
