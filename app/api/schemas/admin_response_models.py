"""Response models for admin API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field

from app.api.schemas.camel import CamelModel
from app.content.models import ContentItem


class AdminTokenResponse(CamelModel):
    """Response model for a successful admin login."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    "tokenType": "bearer",
                    "username": "admin",
                }
            ]
        }
    )

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type", examples=["bearer"])
    username: str


class MutationResponse(CamelModel):
    """Outcome of a create/update/delete; ``reconciliation`` reports the fallback state."""

    success: bool = True
    item: ContentItem | None = None
    reconciliation: Literal["patched", "reloaded", "stale"]
    message: str


class AdminListResponse(CamelModel):
    items: list[ContentItem]
    total: int
    page: int
    limit: int
    total_pages: int
    source: Literal["remote", "fallback"]


class BulkDeleteResponse(CamelModel):
    success: bool = True
    deleted: list[str]
    not_found: list[str]
    reconciliation: Literal["patched", "reloaded", "stale"]
