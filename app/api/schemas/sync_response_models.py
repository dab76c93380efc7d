"""Response models for sync and cache endpoints."""

from __future__ import annotations

from pydantic import Field

from app.api.schemas.camel import CamelModel


class SyncResponse(CamelModel):
    success: bool = True
    articles: int
    events: int
    total: int
    file_written: bool
    message: str


class FallbackStatsResponse(CamelModel):
    exists: bool
    size_kb: int = Field(..., alias="sizeKB")
    article_count: int
    last_modified: str | None = None
    error: str | None = None


class SyncStatusResponse(CamelModel):
    fallback: FallbackStatsResponse
    cache_loaded: bool
    cache_size: int


class ClearCacheResponse(CamelModel):
    success: bool = True
    message: str
