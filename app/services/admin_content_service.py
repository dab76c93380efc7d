"""Admin content service - authoritative writes plus best-effort fallback reconciliation."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from app.content.fallback_store import FallbackStore, FallbackWriteError
from app.content.fast_cache import FastCache
from app.content.models import CONTENT_TYPE_ARTICLE, STATUS_PUBLISHED, ContentItem
from app.content.remote_source import (
    ContentKind,
    ListQuery,
    RemoteNotFoundError,
    RemoteSource,
    RemoteSourceError,
)
from app.content.slug import slugify
from app.content.transform import (
    article_row_to_item,
    article_values,
    event_row_to_item,
    event_values,
)
from app.services.sync_service import SyncService

logger = logging.getLogger(__name__)

ListSource = Literal["remote", "fallback"]


class Reconciliation(StrEnum):
    """How far the Fallback Store got after a successful Remote Source write."""

    PATCHED = "patched"
    RELOADED = "reloaded"
    STALE = "stale"


@dataclass(frozen=True)
class MutationResult:
    item: ContentItem | None
    reconciliation: Reconciliation


@dataclass(frozen=True)
class BulkDeleteResult:
    deleted: list[str]
    not_found: list[str]
    reconciliation: Reconciliation


@dataclass(frozen=True)
class AdminPage:
    items: list[ContentItem]
    total: int
    page: int
    limit: int
    source: ListSource

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


def _row_to_item(kind: ContentKind, row: Mapping[str, Any]) -> ContentItem:
    return event_row_to_item(row) if kind == "event" else article_row_to_item(row)


def _is_kind(item: ContentItem, kind: ContentKind) -> bool:
    return item.is_event if kind == "event" else not item.is_event


def _filter_fallback(items: list[ContentItem], query: ListQuery) -> list[ContentItem]:
    selected = items
    if query.search:
        needle = query.search.casefold()
        selected = [
            item
            for item in selected
            if needle in item.title.casefold() or needle in item.excerpt.casefold()
        ]
    if query.category and query.category != "all":
        wanted = query.category.casefold()
        selected = [item for item in selected if item.category.casefold() == wanted]
    if query.location and query.location != "all":
        wanted_location = query.location.casefold()
        selected = [item for item in selected if wanted_location in item.location.casefold()]
    if query.status and query.status != "all":
        selected = [item for item in selected if item.status == query.status]
    return selected


def _sort_fallback(
    items: list[ContentItem], kind: ContentKind, query: ListQuery
) -> list[ContentItem]:
    if query.sort_by == "title":
        return sorted(items, key=lambda item: (item.title.casefold(), item.id))
    if query.sort_by == "event_date" and kind == "event":
        return sorted(items, key=lambda item: (item.event_date or "", item.id))
    ordered = sorted(items, key=lambda item: item.id)
    ordered.sort(key=lambda item: item.created_at or "", reverse=query.sort_by != "oldest")
    return ordered


def _worst(outcomes: Sequence[Reconciliation]) -> Reconciliation:
    if Reconciliation.STALE in outcomes:
        return Reconciliation.STALE
    if Reconciliation.RELOADED in outcomes:
        return Reconciliation.RELOADED
    return Reconciliation.PATCHED


class AdminContentService:
    """Create/update/delete against the Remote Source, then keep the fallback in step.

    A Remote Source failure is raised to the caller and the Fallback Store is
    left alone. Once the Remote Source write succeeds the mutation is a
    success; fallback reconciliation is attempted in two steps (single-item
    sync, then a manual patch of the whole array) and its failures are only
    logged.
    """

    def __init__(
        self,
        remote: RemoteSource,
        store: FallbackStore,
        cache: FastCache,
        sync: SyncService,
    ) -> None:
        self._remote = remote
        self._store = store
        self._cache = cache
        self._sync = sync

    async def get(self, kind: ContentKind, item_id: str) -> ContentItem:
        """Fetch one item, from the Fallback Store when the Remote Source is down.

        Raises:
            RemoteNotFoundError: When the Remote Source has no such id.
            RemoteSourceError: When the Remote Source fails and the fallback has no copy.
        """
        try:
            row = await self._remote.fetch_row(kind, item_id)
        except RemoteSourceError as exc:
            for item in await self._store.load():
                if item.id == item_id and _is_kind(item, kind):
                    logger.warning(
                        "Serving admin item from fallback store",
                        extra={"kind": kind, "item_id": item_id, "error_code": exc.error_code},
                    )
                    return item
            raise
        if row is None:
            raise RemoteNotFoundError(f"{kind.capitalize()} {item_id} not found")
        return _row_to_item(kind, row)

    async def list_items(
        self, kind: ContentKind, query: ListQuery, *, refresh: bool = False
    ) -> AdminPage:
        if refresh:
            self._cache.clear()
        try:
            result = await self._remote.list_rows(kind, query)
        except RemoteSourceError as exc:
            logger.warning(
                "Admin list falling back to fallback store",
                extra={"kind": kind, "error_code": exc.error_code},
            )
            return await self._list_fallback(kind, query)
        return AdminPage(
            items=[_row_to_item(kind, row) for row in result.rows],
            total=result.total,
            page=query.page,
            limit=query.limit,
            source="remote",
        )

    async def _list_fallback(self, kind: ContentKind, query: ListQuery) -> AdminPage:
        items = [item for item in await self._store.load() if _is_kind(item, kind)]
        items = _sort_fallback(_filter_fallback(items, query), kind, query)
        page = items[query.offset : query.offset + query.limit]
        return AdminPage(
            items=[item.model_copy(update={"content": None}) for item in page],
            total=len(items),
            page=query.page,
            limit=query.limit,
            source="fallback",
        )

    def _values(self, kind: ContentKind, payload: Mapping[str, Any]) -> dict[str, Any]:
        return event_values(payload) if kind == "event" else article_values(payload)

    async def create(self, kind: ContentKind, payload: Mapping[str, Any]) -> MutationResult:
        values = self._values(kind, payload)
        values.setdefault("status", STATUS_PUBLISHED)
        if kind == "article":
            values.setdefault("type", CONTENT_TYPE_ARTICLE)
            # The slug is fixed here; later title edits do not change the URL.
            values.setdefault("slug", slugify(values.get("title")))
        row = await self._remote.create_row(kind, values)
        item = _row_to_item(kind, row)
        logger.info("Created content item", extra={"kind": kind, "item_id": item.id})
        return MutationResult(item=item, reconciliation=await self._reconcile(kind, item.id, item))

    async def update(
        self, kind: ContentKind, item_id: str, payload: Mapping[str, Any]
    ) -> MutationResult:
        row = await self._remote.update_row(kind, item_id, self._values(kind, payload))
        item = _row_to_item(kind, row)
        logger.info("Updated content item", extra={"kind": kind, "item_id": item_id})
        return MutationResult(item=item, reconciliation=await self._reconcile(kind, item_id, item))

    async def delete(self, kind: ContentKind, item_id: str) -> MutationResult:
        await self._remote.delete_row(kind, item_id)
        logger.info("Deleted content item", extra={"kind": kind, "item_id": item_id})
        return MutationResult(item=None, reconciliation=await self._reconcile(kind, item_id, None))

    async def delete_many(self, kind: ContentKind, item_ids: Sequence[str]) -> BulkDeleteResult:
        """Delete each id in turn; ids the Remote Source does not know are reported, not raised.

        A failure partway through still propagates, but the ids already removed from
        the Remote Source are reconciled out of the fallback and Fast Cache first.
        """
        deleted: list[str] = []
        not_found: list[str] = []
        try:
            for item_id in dict.fromkeys(item_ids):
                try:
                    await self._remote.delete_row(kind, item_id)
                except RemoteNotFoundError:
                    not_found.append(item_id)
                    continue
                deleted.append(item_id)
        except RemoteSourceError:
            logger.warning(
                "Bulk delete aborted",
                extra={"kind": kind, "deleted_before_failure": len(deleted)},
            )
            raise
        finally:
            outcomes = [await self._reconcile(kind, item_id, None) for item_id in deleted]

        logger.info(
            "Bulk deleted content items",
            extra={"kind": kind, "deleted": len(deleted), "not_found": len(not_found)},
        )
        return BulkDeleteResult(
            deleted=deleted, not_found=not_found, reconciliation=_worst(outcomes)
        )

    async def _reconcile(
        self, kind: ContentKind, item_id: str, fresh: ContentItem | None
    ) -> Reconciliation:
        try:
            await self._sync.sync_item(item_id, kind)
            return Reconciliation.PATCHED
        except (RemoteSourceError, FallbackWriteError) as exc:
            logger.warning(
                "Single-item sync failed; patching fallback manually",
                extra={"kind": kind, "item_id": item_id, "error": str(exc)},
            )

        try:
            items = await self._store.load()
            index = next((i for i, item in enumerate(items) if item.id == item_id), None)
            if fresh is None:
                items = [item for item in items if item.id != item_id]
            elif index is None:
                items.insert(0, fresh)
            else:
                items[index] = fresh
            await self._store.save(items)
            return Reconciliation.RELOADED
        except FallbackWriteError as exc:
            logger.warning(
                "Fallback reconciliation failed; fallback is stale until the next sync",
                extra={"kind": kind, "item_id": item_id, "error": str(exc)},
            )
            return Reconciliation.STALE
        finally:
            self._cache.clear()
