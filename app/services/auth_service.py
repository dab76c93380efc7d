"""Admin authentication service - checks the single configured admin account."""

from __future__ import annotations

import hmac
import logging

from app.core.auth import verify_password
from app.core.config import settings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base error for authentication-related failures."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message, "invalid_credentials")


class PasswordTooLongError(AuthenticationError):
    """Raised when password exceeds the maximum allowed length (72 bytes)."""

    def __init__(
        self, message: str = "Password must not exceed 72 bytes when UTF-8 encoded"
    ) -> None:
        super().__init__(message, "password_too_long")


def authenticate_admin(username: str, password: str) -> str:
    """Authenticate the dashboard admin.

    Args:
        username: Submitted username
        password: Plain text password

    Returns:
        The admin username

    Raises:
        InvalidCredentialsError: If username or password is incorrect
        PasswordTooLongError: If password exceeds 72 bytes when UTF-8 encoded
    """
    if not hmac.compare_digest(username.encode("utf-8"), settings.admin_username.encode("utf-8")):
        logger.info("Admin login rejected", extra={"reason": "unknown_username"})
        raise InvalidCredentialsError()

    try:
        password_valid = verify_password(password, settings.admin_password_hash)
    except ValueError as e:
        raise PasswordTooLongError() from e

    if not password_valid:
        logger.info("Admin login rejected", extra={"reason": "bad_password"})
        raise InvalidCredentialsError()

    return settings.admin_username
