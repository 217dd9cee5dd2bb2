"""
Tests for the HMAC token service.
"""

import json
from base64 import urlsafe_b64decode, urlsafe_b64encode

import pytest

from auth.jwt import InvalidToken, TokenService, ValidToken

NOW = 1_700_000_000


def _decode(token: str) -> dict:
    encoded = token.split(".")[0]
    return json.loads(urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)))


class TestTokenService:
    def test_issue_and_verify(self, tokens):
        token = tokens.issue("user-1", "alice", now=NOW)
        result = tokens.verify(token, now=NOW + 10)
        assert isinstance(result, ValidToken)
        assert result.claims.subject_id == "user-1"
        assert result.claims.username == "alice"
        assert result.claims.issued_at == NOW
        assert result.claims.expires_at == NOW + 3600

    def test_payload_claims(self, tokens):
        payload = _decode(tokens.issue("user-1", "alice", now=NOW))
        assert payload == {"sub": "user-1", "username": "alice", "iat": NOW, "exp": NOW + 3600}

    def test_valid_until_just_before_expiry(self, tokens):
        token = tokens.issue("user-1", "alice", now=NOW)
        assert isinstance(tokens.verify(token, now=NOW + 3599), ValidToken)

    def test_expired(self, tokens):
        token = tokens.issue("user-1", "alice", now=NOW)
        result = tokens.verify(token, now=NOW + 3600)
        assert result == InvalidToken(reason="expired")

    def test_other_secret_rejected(self, tokens):
        token = TokenService("another-secret").issue("user-1", "alice", now=NOW)
        assert tokens.verify(token, now=NOW) == InvalidToken(reason="bad_signature")

    def test_tampered_payload_rejected(self, tokens):
        token = tokens.issue("user-1", "alice", now=NOW)
        payload = _decode(token)
        payload["sub"] = "user-2"
        forged = urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
        forged_token = forged + "." + token.split(".")[1]
        assert tokens.verify(forged_token, now=NOW) == InvalidToken(reason="bad_signature")

    def test_tampered_signature_rejected(self, tokens):
        token = tokens.issue("user-1", "alice", now=NOW)
        body, sig = token.split(".")
        flipped = ("0" if sig[0] != "0" else "1") + sig[1:]
        assert tokens.verify(f"{body}.{flipped}", now=NOW) == InvalidToken(reason="bad_signature")

    @pytest.mark.parametrize("garbage", ["", "garbage", "a.b.c", ".", "abc.", "!!!.deadbeef", "ü.ß"])
    def test_garbage_is_invalid(self, tokens, garbage):
        result = tokens.verify(garbage, now=NOW)
        assert isinstance(result, InvalidToken)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService("")
