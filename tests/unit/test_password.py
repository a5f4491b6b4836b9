"""Tests for password hashing and the strength rules for new users."""

import pytest

from loro.auth.password import (
    PasswordStrengthError,
    hash_password,
    validate_password_strength,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("Str0ngPassword")
        assert verify_password("Str0ngPassword", hashed) is True

    def test_wrong_password_rejected(self):
        hashed = hash_password("Str0ngPassword")
        assert verify_password("Wr0ngPassword", hashed) is False

    def test_hash_is_argon2id(self):
        assert hash_password("Str0ngPassword").startswith("$argon2id$")

    def test_garbage_hash_is_a_mismatch(self):
        assert verify_password("Str0ngPassword", "not-a-hash") is False


class TestPasswordStrength:
    def test_accepts_letters_and_digits(self):
        validate_password_strength("abcdefg1")

    @pytest.mark.parametrize(
        ("password", "message"),
        [
            ("", "Password cannot be empty"),
            ("   ", "Password cannot be empty"),
            ("short1", "Password must be at least 8 characters"),
            ("a1" * 65, "Password must not exceed 128 characters"),
            ("12345678", "Password must contain at least one letter"),
            ("abcdefgh", "Password must contain at least one digit"),
        ],
    )
    def test_rejects(self, password, message):
        with pytest.raises(PasswordStrengthError, match=message):
            validate_password_strength(password)
