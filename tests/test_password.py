"""
Tests for bcrypt password hashing.
"""

import pytest

from auth.errors import MalformedHashError


class TestPasswordHasher:
    def test_hash_is_not_plaintext(self, hasher):
        hashed = hasher.hash("Secr3t!")
        assert hashed != "Secr3t!"
        assert hashed.startswith("$2")

    def test_same_password_hashes_differently(self, hasher):
        assert hasher.hash("Secr3t!") != hasher.hash("Secr3t!")

    def test_verify_round_trip(self, hasher):
        hashed = hasher.hash("Secr3t!")
        assert hasher.verify("Secr3t!", hashed) is True

    @pytest.mark.parametrize("other", ["secr3t!", "Secr3t", "", "Secr3t!!"])
    def test_verify_rejects_other_passwords(self, hasher, other):
        hashed = hasher.hash("Secr3t!")
        assert hasher.verify(other, hashed) is False

    def test_cost_factor_is_embedded(self, hasher):
        assert hasher.hash("x").split("$")[2] == "04"

    def test_malformed_hash_raises(self, hasher):
        with pytest.raises(MalformedHashError):
            hasher.verify("Secr3t!", "not-a-bcrypt-hash")


class TestLongPasswords:
    def test_long_password_hashes_and_verifies(self, hasher):
        hashed = hasher.hash("p" * 80)
        assert hasher.verify("p" * 80, hashed) is True

    def test_long_wrong_password_is_a_mismatch(self, hasher):
        hashed = hasher.hash("Secr3t!")
        assert hasher.verify("p" * 80, hashed) is False

    def test_multibyte_password_over_limit(self, hasher):
        password = "é" * 50  # 100 bytes in UTF-8
        assert hasher.verify(password, hasher.hash(password)) is True
