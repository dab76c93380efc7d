"""API request and response schemas.

Import request/response models from the submodules (e.g. admin_request_models,
sync_response_models) or from this package for a single entry point.
"""

from __future__ import annotations

from app.api.schemas.admin_request_models import (
    AdminLoginRequest,
    ArticleCreateRequest,
    ArticleUpdateRequest,
    BulkDeleteRequest,
    EventCreateRequest,
    EventUpdateRequest,
)
from app.api.schemas.admin_response_models import (
    AdminListResponse,
    AdminTokenResponse,
    BulkDeleteResponse,
    MutationResponse,
)
from app.api.schemas.content_response_models import (
    ArticleDetailResponse,
    ContentListResponse,
    EventDetailResponse,
)
from app.api.schemas.meta_response_models import HealthResponse
from app.api.schemas.sync_response_models import (
    ClearCacheResponse,
    FallbackStatsResponse,
    SyncResponse,
    SyncStatusResponse,
)

__all__ = [
    "AdminListResponse",
    "AdminLoginRequest",
    "AdminTokenResponse",
    "ArticleCreateRequest",
    "ArticleDetailResponse",
    "ArticleUpdateRequest",
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "ClearCacheResponse",
    "ContentListResponse",
    "EventCreateRequest",
    "EventDetailResponse",
    "EventUpdateRequest",
    "FallbackStatsResponse",
    "HealthResponse",
    "MutationResponse",
    "SyncResponse",
    "SyncStatusResponse",
]
