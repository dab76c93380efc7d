"""Unit tests for admin authentication.

These tests verify password hashing, JWT token creation and verification, the
admin credential check and the current-admin dependency without any external
dependencies.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException, status
from jose import jwt

from app.api.dependencies.current_admin import get_current_admin
from app.core.auth import (
    ADMIN_ROLE,
    create_access_token,
    create_admin_token,
    get_password_hash,
    verify_password,
    verify_token,
)
from app.core.config import settings
from app.services.auth_service import (
    InvalidCredentialsError,
    PasswordTooLongError,
    authenticate_admin,
)


class TestPasswordHashing:
    """Test password hashing and verification functions."""

    def test_get_password_hash_returns_salted_hash(self) -> None:
        """Test that hashing the same password twice produces different hashes."""
        password = "test_password_123"

        hash1 = get_password_hash(password)
        hash2 = get_password_hash(password)

        assert hash1 != password
        assert hash1 != hash2
        assert verify_password(password, hash1) is True
        assert verify_password("wrong_password", hash1) is False

    def test_password_at_bcrypt_limit(self) -> None:
        """Test that a 72-byte password can be hashed and verified."""
        long_password = "a" * 72

        assert verify_password(long_password, get_password_hash(long_password)) is True

    def test_password_hash_rejects_too_long_passwords(self) -> None:
        """Test that passwords longer than 72 bytes are rejected rather than truncated."""
        with pytest.raises(ValueError, match="72 bytes"):
            get_password_hash("a" * 100)
        with pytest.raises(ValueError, match="72 bytes"):
            verify_password("é" * 40, get_password_hash("short"))


class TestJWTTokens:
    """Test JWT token creation and verification."""

    def test_create_access_token_with_custom_expires_delta(self) -> None:
        """Test that create_access_token uses custom expiration time."""
        expires_delta = timedelta(minutes=30)

        token = create_access_token({"sub": "admin"}, expires_delta=expires_delta)

        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        exp_time = datetime.fromtimestamp(payload["exp"], tz=UTC)
        assert abs((exp_time - (datetime.now(UTC) + expires_delta)).total_seconds()) < 5

    def test_create_admin_token_carries_role(self) -> None:
        """Test that admin tokens carry the subject and admin role."""
        payload = verify_token(create_admin_token("admin"))

        assert payload is not None
        assert payload["sub"] == "admin"
        assert payload["role"] == ADMIN_ROLE

    @pytest.mark.parametrize(
        "token",
        [
            "invalid.token.here",
            "",
            jwt.encode({"sub": "admin"}, "wrong_secret", algorithm="HS256"),
        ],
    )
    def test_verify_token_rejects_bad_tokens(self, token: str) -> None:
        """Test that malformed or foreign tokens decode to None."""
        assert verify_token(token) is None

    def test_verify_token_expired_token(self) -> None:
        """Test that verify_token returns None for expired token."""
        expired_token = create_access_token({"sub": "admin"}, expires_delta=timedelta(hours=-1))

        assert verify_token(expired_token) is None


class TestAuthenticateAdmin:
    """Test the configured admin credential check."""

    def test_valid_credentials(self, admin_password: str) -> None:
        """Test that the configured credentials return the admin username."""
        username = authenticate_admin(settings.admin_username, admin_password)

        assert username == settings.admin_username

    def test_wrong_password(self) -> None:
        """Test that a wrong password is rejected."""
        with pytest.raises(InvalidCredentialsError):
            authenticate_admin(settings.admin_username, "not-the-password")

    def test_wrong_username(self, admin_password: str) -> None:
        """Test that an unknown username is rejected with the same error."""
        with pytest.raises(InvalidCredentialsError) as exc_info:
            authenticate_admin("someone-else", admin_password)

        assert exc_info.value.error_code == "invalid_credentials"

    def test_password_too_long(self) -> None:
        """Test that an over-long password is reported distinctly."""
        with pytest.raises(PasswordTooLongError):
            authenticate_admin(settings.admin_username, "a" * 100)


class TestGetCurrentAdmin:
    """Test get_current_admin FastAPI dependency."""

    @pytest.mark.asyncio
    async def test_valid_admin_token(self) -> None:
        """Test that an admin token yields the admin username."""
        token = create_admin_token(settings.admin_username)

        assert await get_current_admin(token=token) == settings.admin_username

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "claims",
        [
            {"sub": "admin"},
            {"role": ADMIN_ROLE},
            {"sub": "someone-else", "role": ADMIN_ROLE},
        ],
    )
    async def test_rejected_claims(self, claims: dict[str, str]) -> None:
        """Test that tokens without the admin role or for another subject are refused."""
        token = create_access_token(claims)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_admin(token=token)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_invalid_token(self) -> None:
        """Test that garbage tokens are refused."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_admin(token="invalid.token")

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
