"""API-layer dependencies: current admin and services from the app registry."""

from app.api.dependencies.current_admin import get_current_admin
from app.api.dependencies.services import (
    get_admin_content_service,
    get_content_resolver,
    get_fallback_store,
    get_fast_cache,
    get_sync_service,
)

__all__ = [
    "get_admin_content_service",
    "get_content_resolver",
    "get_current_admin",
    "get_fallback_store",
    "get_fast_cache",
    "get_sync_service",
]
