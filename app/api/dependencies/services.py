"""Dependencies resolving process-wide services from ``app.state.services``."""

from __future__ import annotations

from typing import Any, cast

from fastapi import Request

from app.content.fallback_store import FallbackStore
from app.content.fast_cache import FastCache
from app.services.admin_content_service import AdminContentService
from app.services.resolution_service import ContentResolver
from app.services.sync_service import SyncService


def _service(request: Request, key: str) -> Any:
    return request.app.state.services[key]


def get_content_resolver(request: Request) -> ContentResolver:
    return cast(ContentResolver, _service(request, "content_resolver"))


def get_sync_service(request: Request) -> SyncService:
    return cast(SyncService, _service(request, "sync_service"))


def get_admin_content_service(request: Request) -> AdminContentService:
    return cast(AdminContentService, _service(request, "admin_content_service"))


def get_fallback_store(request: Request) -> FallbackStore:
    return cast(FallbackStore, _service(request, "fallback_store"))


def get_fast_cache(request: Request) -> FastCache:
    return cast(FastCache, _service(request, "fast_cache"))
