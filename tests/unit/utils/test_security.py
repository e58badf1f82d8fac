"""Tests for password hashing and bearer tokens."""

from datetime import timedelta
from unittest.mock import patch

import jwt
import pytest

from app.exceptions import AuthenticationError
from app.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.utils.timeutils import utcnow


class TestPasswords:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("correct horse")
        assert verify_password("correct horse", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("correct horse")
        assert verify_password("battery staple", hashed) is False


class TestAccessTokens:
    def test_round_trip_carries_identity(self):
        token = create_access_token(42, "ada@example.com")

        payload = decode_access_token(token)

        assert payload["user_id"] == 42
        assert payload["email"] == "ada@example.com"
        assert "exp" in payload

    def test_expired_token_rejected(self):
        # Issued long enough ago that its lifetime has passed
        past = utcnow() - timedelta(hours=200)
        with patch("app.utils.security.utcnow", return_value=past):
            token = create_access_token(1, "a@b.c")

        with pytest.raises(AuthenticationError, match="Token expired"):
            decode_access_token(token)

    def test_token_signed_with_other_secret_rejected(self, settings):
        token = jwt.encode(
            {"user_id": 1, "exp": utcnow() + timedelta(hours=1)},
            "not-the-secret",
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not-a-jwt")

    def test_payload_without_user_id_rejected(self, settings):
        token = jwt.encode(
            {"email": "a@b.c", "exp": utcnow() + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(AuthenticationError, match="Invalid token payload"):
            decode_access_token(token)
