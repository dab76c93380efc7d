"""Public read endpoints. Backend failures degrade to cached or fallback content."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.dependencies.services import get_content_resolver
from app.api.openapi_responses import ErrorExample, error_responses, rate_limited_response
from app.api.schemas.content_response_models import (
    ArticleDetailResponse,
    ContentListResponse,
    EventDetailResponse,
)
from app.content.transform import image_kind
from app.core.errors import build_http_error
from app.core.rate_limit import DEFAULT_RATE_LIMIT, limit, rate_limit_ip_key
from app.services.resolution_service import ContentResolver

router = APIRouter()


def _not_found_responses(resource: str) -> dict[int | str, dict[str, Any]]:
    return {
        **error_responses(
            ErrorExample(
                status_code=status.HTTP_404_NOT_FOUND,
                error="not_found",
                message=f"{resource} not found",
                description=f"No {resource.lower()} matches the slug",
            )
        ),
        **rate_limited_response(),
    }


@router.get(
    "/articles",
    summary="List published content",
    description="Newest first; a placeholder item is returned when no source has content.",
    response_model=ContentListResponse,
    responses=rate_limited_response(),
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_ip_key)
async def list_content(
    request: Request,
    content_type: str | None = Query(None, alias="type", max_length=50),
    category: str | None = Query(None, max_length=200),
    location: str | None = Query(None, max_length=200),
    limit_items: int | None = Query(None, ge=1, le=500, alias="limit"),
    resolver: ContentResolver = Depends(get_content_resolver),
) -> ContentListResponse:
    items = await resolver.list_public_content(
        content_type=content_type, category=category, location=location, limit=limit_items
    )
    return ContentListResponse(items=items, count=len(items))


@router.get(
    "/articles/{slug}",
    summary="Get article by slug",
    description="Resolved article with its full body and a shuffled set of related articles.",
    response_model=ArticleDetailResponse,
    responses=_not_found_responses("Article"),
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_ip_key)
async def get_article_by_slug(
    request: Request,
    slug: str,
    resolver: ContentResolver = Depends(get_content_resolver),
) -> ArticleDetailResponse:
    article = await resolver.find_article_by_slug(slug)
    if article is None:
        raise build_http_error(
            status_code=status.HTTP_404_NOT_FOUND,
            error="not_found",
            message="Article not found",
        )
    article = await resolver.ensure_full_content(article)
    related = await resolver.get_related_articles(article)
    return ArticleDetailResponse(
        article=article, related=related, image_kind=image_kind(article.image_url)
    )


@router.get(
    "/events/{slug}",
    summary="Get event by slug",
    response_model=EventDetailResponse,
    responses=_not_found_responses("Event"),
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_ip_key)
async def get_event_by_slug(
    request: Request,
    slug: str,
    resolver: ContentResolver = Depends(get_content_resolver),
) -> EventDetailResponse:
    event = await resolver.find_event_by_slug(slug)
    if event is None:
        raise build_http_error(
            status_code=status.HTTP_404_NOT_FOUND,
            error="not_found",
            message="Event not found",
        )
    event = await resolver.ensure_full_content(event)
    return EventDetailResponse(event=event, image_kind=image_kind(event.image_url))
