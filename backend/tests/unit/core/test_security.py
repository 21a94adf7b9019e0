"""
Unit Tests for Security Module
Tests for: password hashing, session tokens, temporary passwords
"""
import string
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt
from fastapi import HTTPException

from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_session_token,
    decode_token,
    generate_temp_password,
)
from app.core.config import settings


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Bcrypt generates a new salt for every hash"""
        password = "testpassword123"

        assert get_password_hash(password) != get_password_hash(password)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_hash_long_password_truncated(self):
        """Bcrypt only looks at the first 72 bytes"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True

    def test_hash_unicode_password(self):
        password = "pässwörd-ünïcode"
        hashed = get_password_hash(password)

        assert verify_password(password, hashed) is True


class TestSessionToken:
    """Test session token functions"""

    def test_session_token_claims(self):
        token = create_session_token("user123", "lecturer")

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == "user123"
        assert payload["role"] == "lecturer"
        assert payload["type"] == "access"

    def test_session_token_default_lifetime(self):
        token = create_session_token("user123", "student")

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = (exp - datetime.now(timezone.utc)).total_seconds()

        expected = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert expected - 60 < remaining <= expected

    def test_create_access_token_with_expiry(self):
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(hours=1))

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = (exp - datetime.now(timezone.utc)).total_seconds()

        assert 3500 < remaining < 3700


class TestDecodeToken:
    """Test token decoding"""

    def test_decode_valid_token(self):
        token = create_session_token("user123", "admin")

        payload = decode_token(token)

        assert payload["sub"] == "user123"
        assert payload["role"] == "admin"

    def test_decode_invalid_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token("invalid_token_string")

        assert exc_info.value.status_code == 401
        assert "Could not validate credentials" in exc_info.value.detail

    def test_decode_expired_token(self):
        expired_token = jwt.encode(
            {"sub": "user123", "exp": datetime.now(timezone.utc) - timedelta(hours=1), "type": "access"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(HTTPException) as exc_info:
            decode_token(expired_token)

        assert exc_info.value.status_code == 401

    def test_decode_token_wrong_secret(self):
        token = jwt.encode({"sub": "user123"}, "not-the-secret", algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(HTTPException):
            decode_token(token)


class TestTempPassword:
    """Test temporary passwords issued by admin resets"""

    def test_default_length(self):
        assert len(generate_temp_password()) == 8

    @pytest.mark.parametrize("attempt", range(20))
    def test_contains_every_character_class(self, attempt):
        password = generate_temp_password()

        assert any(c in string.ascii_uppercase for c in password)
        assert any(c in string.ascii_lowercase for c in password)
        assert any(c in string.digits for c in password)
        assert all(c in string.ascii_letters + string.digits for c in password)

    def test_custom_length(self):
        assert len(generate_temp_password(12)) == 12

    def test_too_short_rejected(self):
        with pytest.raises(ValueError):
            generate_temp_password(2)
