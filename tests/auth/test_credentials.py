"""Tests for CredentialManager: bcrypt hashing, verification, and rehash detection."""

from unittest.mock import patch

import bcrypt
import pytest

from backend.auth.credentials import CredentialManager


class TestHash:
    def test_hash_verifies(self, credentials):
        hashed = credentials.hash("pw123456")
        assert credentials.verify("pw123456", hashed) is True

    def test_hash_is_salted(self, credentials):
        """Hashing the same secret twice yields two different strings."""
        first = credentials.hash("same-secret")
        second = credentials.hash("same-secret")
        assert first != second
        assert credentials.verify("same-secret", first)
        assert credentials.verify("same-secret", second)

    def test_hash_embeds_salt_and_cost(self, credentials):
        hashed = credentials.hash("pw123456")
        prefix, cost, rest = hashed.split("$")[1:]
        assert prefix == "2b"
        assert int(cost) == credentials.rounds
        # 22 chars of salt (16 bytes) + 31 chars of derived key
        assert len(rest) == 53

    def test_hash_never_contains_plaintext(self, credentials):
        assert "supersecret" not in credentials.hash("supersecret")

    def test_hash_rejects_over_72_bytes(self, credentials):
        with pytest.raises(ValueError):
            credentials.hash("x" * 73)

    def test_multibyte_length_counts_bytes(self, credentials):
        # 36 two-byte characters = 72 bytes, accepted
        hashed = credentials.hash("é" * 36)
        assert credentials.verify("é" * 36, hashed)
        with pytest.raises(ValueError):
            credentials.hash("é" * 37)

    def test_default_cost_is_production_strength(self):
        with patch("backend.auth.credentials.bcrypt.gensalt", wraps=bcrypt.gensalt) as gensalt:
            CredentialManager().hash("pw123456")
        gensalt.assert_called_once_with(rounds=12)

    def test_rounds_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            CredentialManager(rounds=3)
        with pytest.raises(ValueError):
            CredentialManager(rounds=32)


class TestVerify:
    def test_wrong_password_fails(self, credentials):
        hashed = credentials.hash("correct horse")
        assert credentials.verify("battery staple", hashed) is False

    def test_case_sensitive(self, credentials):
        hashed = credentials.hash("Secret1")
        assert credentials.verify("secret1", hashed) is False

    @pytest.mark.parametrize(
        "malformed",
        [
            "",
            "not-a-hash",
            "$2b$04$tooshort",
            "abcdef:0123456789",  # salt:key hex format from older records
            "$argon2id$v=19$m=65536,t=3,p=4$abc$def",
        ],
    )
    def test_malformed_hash_returns_false(self, credentials, malformed):
        assert credentials.verify("pw123456", malformed) is False

    def test_non_string_inputs_return_false(self, credentials):
        hashed = credentials.hash("pw123456")
        assert credentials.verify(None, hashed) is False
        assert credentials.verify("pw123456", None) is False

    def test_over_long_plaintext_returns_false(self, credentials):
        hashed = credentials.hash("x" * 72)
        assert credentials.verify("x" * 73, hashed) is False

    def test_verify_uses_constant_time_check(self, credentials):
        hashed = credentials.hash("pw123456")
        with patch("backend.auth.credentials.bcrypt.checkpw", return_value=True) as checkpw:
            assert credentials.verify("pw123456", hashed) is True
        checkpw.assert_called_once_with(b"pw123456", hashed.encode("utf-8"))

    def test_hash_from_other_cost_still_verifies(self):
        old = CredentialManager(rounds=4).hash("pw123456")
        assert CredentialManager(rounds=5).verify("pw123456", old) is True


class TestNeedsRehash:
    def test_same_cost_no_rehash(self, credentials):
        assert credentials.needs_rehash(credentials.hash("pw123456")) is False

    def test_different_cost_needs_rehash(self):
        old = CredentialManager(rounds=4).hash("pw123456")
        assert CredentialManager(rounds=5).needs_rehash(old) is True

    @pytest.mark.parametrize("value", ["", "garbage", "$2b$xx$abc", None])
    def test_unparseable_needs_rehash(self, credentials, value):
        assert credentials.needs_rehash(value) is True
