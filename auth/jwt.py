"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256::

    <base64url(claims)>.<hex signature>

Claims carry ``sub`` (user id), ``username``, ``iat`` and ``exp``.
Verification never raises; it returns ``ValidToken`` or ``InvalidToken``.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Optional, Union

from pydantic import BaseModel


class TokenClaims(BaseModel):
    model_config = {"frozen": True}

    subject_id: str
    username: str
    issued_at: int
    expires_at: int


class ValidToken(BaseModel):
    model_config = {"frozen": True}

    claims: TokenClaims


class InvalidToken(BaseModel):
    model_config = {"frozen": True}

    reason: str  # "malformed" | "bad_signature" | "expired"


TokenVerification = Union[ValidToken, InvalidToken]


class TokenService:
    """Issues and verifies stateless session tokens."""

    def __init__(self, secret: str, expiry_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, subject_id: str, username: str, now: Optional[float] = None) -> str:
        """Create a signed token for ``subject_id`` valid for ``expiry_seconds``."""
        issued_at = int(now if now is not None else time.time())
        payload = {
            "sub": subject_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode().rstrip("=") + "." + self._sign(raw)

    def verify(self, token: str, now: Optional[float] = None) -> TokenVerification:
        parts = token.split(".") if token else []
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return InvalidToken(reason="malformed")

        encoded, sig = parts
        try:
            raw = urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
        except (binascii.Error, ValueError):
            return InvalidToken(reason="malformed")

        if not hmac.compare_digest(sig.encode("utf-8", "replace"), self._sign(raw).encode()):
            return InvalidToken(reason="bad_signature")

        try:
            payload = json.loads(raw)
            claims = TokenClaims(
                subject_id=str(payload["sub"]),
                username=str(payload["username"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (ValueError, KeyError, TypeError):
            return InvalidToken(reason="malformed")

        current = now if now is not None else time.time()
        if claims.expires_at <= current:
            return InvalidToken(reason="expired")
        return ValidToken(claims=claims)
