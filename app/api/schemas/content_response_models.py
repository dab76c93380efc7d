"""Response models for public content endpoints."""

from __future__ import annotations

from app.api.schemas.camel import CamelModel
from app.content.models import ContentItem
from app.content.transform import ImageKind


class ArticleDetailResponse(CamelModel):
    article: ContentItem
    related: list[ContentItem]
    # How the page should render ``article.imageUrl``.
    image_kind: ImageKind


class EventDetailResponse(CamelModel):
    event: ContentItem
    image_kind: ImageKind


class ContentListResponse(CamelModel):
    items: list[ContentItem]
    count: int
