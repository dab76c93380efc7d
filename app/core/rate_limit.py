from __future__ import annotations

from collections.abc import Callable
from typing import Final, ParamSpec, TypeVar, cast

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.auth import ADMIN_ROLE, verify_token
from app.core.config import settings

DEFAULT_RATE_LIMIT: Final[str] = "120/minute"
HEALTH_RATE_LIMIT: Final[str] = "300/minute"
ADMIN_LOGIN_RATE_LIMIT: Final[str] = "10/minute"
# Full syncs hit both tables and rewrite the fallback file.
SYNC_RATE_LIMIT: Final[str] = "6/minute"

P = ParamSpec("P")
R = TypeVar("R")
KeyFunc = Callable[[Request], str]


def _admin_subject(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    payload = verify_token(token)
    if not payload or payload.get("role") != ADMIN_ROLE:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) and subject else None


def rate_limit_ip_key(request: Request) -> str:
    return f"ip:{get_remote_address(request)}"


def rate_limit_admin_or_ip_key(request: Request) -> str:
    """Admins share one bucket across addresses; everyone else is keyed by address."""
    subject = _admin_subject(request)
    if subject is not None:
        return f"admin:{subject}"
    return rate_limit_ip_key(request)


limiter = Limiter(
    key_func=rate_limit_admin_or_ip_key,
    default_limits=[DEFAULT_RATE_LIMIT],
    storage_uri=settings.rate_limit_storage_url,
    in_memory_fallback_enabled=True,
    in_memory_fallback=[DEFAULT_RATE_LIMIT],
)


def limit(limit_value: str, *, key_func: KeyFunc) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Typed wrapper for SlowAPI's limit decorator."""
    limit_decorator = cast(
        Callable[..., Callable[[Callable[P, R]], Callable[P, R]]],
        limiter.limit,
    )
    return limit_decorator(limit_value, key_func=key_func)
