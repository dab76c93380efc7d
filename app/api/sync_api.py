"""Sync and cache endpoints: rebuild the fallback file, download it, inspect it."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.dependencies.current_admin import get_current_admin
from app.api.dependencies.services import get_fallback_store, get_fast_cache, get_sync_service
from app.api.openapi_responses import (
    rate_limited_response,
    remote_unavailable_response,
    unauthorized_response,
)
from app.api.schemas.sync_response_models import (
    ClearCacheResponse,
    FallbackStatsResponse,
    SyncResponse,
    SyncStatusResponse,
)
from app.content.fallback_store import FallbackStore
from app.content.fast_cache import FastCache
from app.content.remote_source import RemoteSourceError
from app.core.errors import http_error_from_remote
from app.core.rate_limit import (
    DEFAULT_RATE_LIMIT,
    SYNC_RATE_LIMIT,
    limit,
    rate_limit_admin_or_ip_key,
)
from app.services.sync_service import SyncService

router = APIRouter()

_SYNC_RESPONSES = {
    **unauthorized_response(),
    **remote_unavailable_response(),
    **rate_limited_response(),
}


async def _run_sync(service: SyncService, limit_rows: int | None) -> SyncResponse:
    try:
        result = await service.sync_all(limit=limit_rows)
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc
    message = f"Synced {result.articles} articles and {result.events} events"
    if not result.file_written:
        message += "; fallback file could not be written"
    return SyncResponse(
        articles=result.articles,
        events=result.events,
        total=result.total,
        file_written=result.file_written,
        message=message,
    )


@router.post(
    "/sync-articles",
    summary="Run full sync",
    description="Rebuild the fallback file from the database and clear the fast cache.",
    response_model=SyncResponse,
    responses=_SYNC_RESPONSES,
)
@limit(SYNC_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def sync_articles(
    request: Request,
    limit_rows: int | None = Query(None, ge=1, alias="limit"),
    _admin: str = Depends(get_current_admin),
    service: SyncService = Depends(get_sync_service),
) -> SyncResponse:
    return await _run_sync(service, limit_rows)


@router.get(
    "/sync-articles",
    summary="Run full sync",
    description="Same as POST; kept for dashboards that trigger the sync with a link.",
    response_model=SyncResponse,
    responses=_SYNC_RESPONSES,
)
@limit(SYNC_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def sync_articles_get(
    request: Request,
    limit_rows: int | None = Query(None, ge=1, alias="limit"),
    _admin: str = Depends(get_current_admin),
    service: SyncService = Depends(get_sync_service),
) -> SyncResponse:
    return await _run_sync(service, limit_rows)


@router.get(
    "/sync-articles/download",
    summary="Download content snapshot",
    description="Current database content as a downloadable JSON file.",
    response_class=Response,
    responses={
        200: {"content": {"application/json": {}}, "description": "JSON array attachment"},
        **_SYNC_RESPONSES,
    },
)
@limit(SYNC_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def download_snapshot(
    request: Request,
    _admin: str = Depends(get_current_admin),
    service: SyncService = Depends(get_sync_service),
) -> Response:
    try:
        items = await service.export_items()
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc
    filename = f"articles-{datetime.now(UTC).date().isoformat()}.json"
    return Response(
        content=FallbackStore.serialize(items),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/sync-articles/status",
    summary="Fallback and cache status",
    response_model=SyncStatusResponse,
    responses={**unauthorized_response(), **rate_limited_response()},
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def sync_status(
    request: Request,
    _admin: str = Depends(get_current_admin),
    store: FallbackStore = Depends(get_fallback_store),
    cache: FastCache = Depends(get_fast_cache),
) -> SyncStatusResponse:
    stats = await store.stats()
    return SyncStatusResponse(
        fallback=FallbackStatsResponse(
            exists=stats.exists,
            size_kb=stats.size_kb,
            article_count=stats.article_count,
            last_modified=stats.last_modified,
            error=stats.error,
        ),
        cache_loaded=cache.is_loaded,
        cache_size=cache.size,
    )


@router.post(
    "/clear-cache",
    summary="Clear fast cache",
    response_model=ClearCacheResponse,
    responses={**unauthorized_response(), **rate_limited_response()},
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def clear_cache(
    request: Request,
    _admin: str = Depends(get_current_admin),
    cache: FastCache = Depends(get_fast_cache),
) -> ClearCacheResponse:
    cache.clear()
    return ClearCacheResponse(message="Fast cache cleared")
