"""Admin event endpoints: authoritative writes with best-effort fallback reconciliation."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.dependencies.current_admin import get_current_admin
from app.api.dependencies.services import get_admin_content_service
from app.api.openapi_responses import (
    rate_limited_response,
    remote_write_responses,
    unauthorized_response,
)
from app.api.schemas.admin_request_models import (
    BulkDeleteRequest,
    EventCreateRequest,
    EventUpdateRequest,
)
from app.api.schemas.admin_response_models import (
    AdminListResponse,
    BulkDeleteResponse,
    MutationResponse,
)
from app.content.models import ContentItem
from app.content.remote_source import ListQuery, RemoteSourceError
from app.core.errors import http_error_from_remote
from app.core.rate_limit import DEFAULT_RATE_LIMIT, limit, rate_limit_admin_or_ip_key
from app.services.admin_content_service import AdminContentService

router = APIRouter()

EventSort = Literal["newest", "oldest", "title", "event_date"]

_WRITE_RESPONSES = {
    **unauthorized_response(),
    **remote_write_responses("Event"),
    **rate_limited_response(),
}


@router.get(
    "",
    summary="List events",
    description="Paginated event list; served from the fallback file when the database is down.",
    response_model=AdminListResponse,
    responses={**unauthorized_response(), **rate_limited_response()},
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def list_events(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="limit"),
    search: str = Query("", max_length=200),
    category: str = Query("", max_length=200),
    location: str = Query("", max_length=200),
    status_filter: str = Query("", alias="status", max_length=20),
    sort_by: EventSort = Query("newest", alias="sortBy"),
    refresh: bool = Query(False),
    _admin: str = Depends(get_current_admin),
    service: AdminContentService = Depends(get_admin_content_service),
) -> AdminListResponse:
    query = ListQuery(
        page=page,
        limit=page_size,
        search=search.strip(),
        category=category.strip(),
        location=location.strip(),
        status=status_filter.strip(),
        sort_by=sort_by,
    )
    result = await service.list_items("event", query, refresh=refresh)
    return AdminListResponse(
        items=result.items,
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        source=result.source,
    )


@router.post(
    "",
    summary="Create event",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_RESPONSES,
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def create_event(
    request: Request,
    payload: EventCreateRequest,
    _admin: str = Depends(get_current_admin),
    service: AdminContentService = Depends(get_admin_content_service),
) -> MutationResponse:
    try:
        result = await service.create(
            "event", payload.model_dump(by_alias=True, exclude_unset=True)
        )
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc
    return MutationResponse(
        item=result.item,
        reconciliation=result.reconciliation.value,
        message="Event created successfully",
    )


@router.delete(
    "",
    summary="Delete several events",
    response_model=BulkDeleteResponse,
    responses=_WRITE_RESPONSES,
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def delete_events(
    request: Request,
    payload: BulkDeleteRequest,
    _admin: str = Depends(get_current_admin),
    service: AdminContentService = Depends(get_admin_content_service),
) -> BulkDeleteResponse:
    try:
        result = await service.delete_many("event", payload.ids)
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc
    return BulkDeleteResponse(
        deleted=result.deleted,
        not_found=result.not_found,
        reconciliation=result.reconciliation.value,
    )


@router.get(
    "/{event_id}",
    summary="Get event",
    response_model=ContentItem,
    responses=_WRITE_RESPONSES,
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def get_event(
    request: Request,
    event_id: str,
    _admin: str = Depends(get_current_admin),
    service: AdminContentService = Depends(get_admin_content_service),
) -> ContentItem:
    try:
        return await service.get("event", event_id)
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc


@router.put(
    "/{event_id}",
    summary="Update event",
    response_model=MutationResponse,
    responses=_WRITE_RESPONSES,
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def update_event(
    request: Request,
    event_id: str,
    payload: EventUpdateRequest,
    _admin: str = Depends(get_current_admin),
    service: AdminContentService = Depends(get_admin_content_service),
) -> MutationResponse:
    try:
        result = await service.update(
            "event", event_id, payload.model_dump(by_alias=True, exclude_unset=True)
        )
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc
    return MutationResponse(
        item=result.item,
        reconciliation=result.reconciliation.value,
        message="Event updated successfully",
    )


@router.delete(
    "/{event_id}",
    summary="Delete event",
    response_model=MutationResponse,
    responses=_WRITE_RESPONSES,
)
@limit(DEFAULT_RATE_LIMIT, key_func=rate_limit_admin_or_ip_key)
async def delete_event(
    request: Request,
    event_id: str,
    _admin: str = Depends(get_current_admin),
    service: AdminContentService = Depends(get_admin_content_service),
) -> MutationResponse:
    try:
        result = await service.delete("event", event_id)
    except RemoteSourceError as exc:
        raise http_error_from_remote(exc) from exc
    return MutationResponse(
        reconciliation=result.reconciliation.value,
        message="Event deleted successfully",
    )
