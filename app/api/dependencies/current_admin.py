"""Dependency that provides the authenticated admin from the request."""

from __future__ import annotations

from fastapi import Depends, status

from app.core.auth import ADMIN_ROLE, oauth2_scheme, verify_token
from app.core.config import settings
from app.core.errors import build_http_error


async def get_current_admin(token: str = Depends(oauth2_scheme)) -> str:
    """FastAPI dependency returning the admin username carried by the bearer token."""
    credentials_exception = build_http_error(
        status_code=status.HTTP_401_UNAUTHORIZED,
        error="unauthorized",
        message="Admin authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token(token)
    if payload is None:
        raise credentials_exception

    username = payload.get("sub")
    if not isinstance(username, str) or payload.get("role") != ADMIN_ROLE:
        raise credentials_exception

    if username != settings.admin_username:
        raise credentials_exception

    return username
