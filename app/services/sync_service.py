"""Sync service - rebuilds the Fallback Store from the Remote Source."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Literal

from app.content.fallback_store import FallbackStore, FallbackWriteError
from app.content.fast_cache import FastCache
from app.content.models import ContentItem
from app.content.remote_source import ContentKind, RemoteSource, RemoteUnavailableError
from app.content.transform import article_row_to_item, event_row_to_item
from app.core.config import Settings

logger = logging.getLogger(__name__)

ItemSyncAction = Literal["patched", "inserted", "removed"]


@dataclass(frozen=True)
class SyncResult:
    articles: int
    events: int
    file_written: bool

    @property
    def total(self) -> int:
        return self.articles + self.events


class SyncService:
    """Pull-based reconciliation of the Fallback Store and Fast Cache."""

    def __init__(
        self,
        remote: RemoteSource,
        store: FallbackStore,
        cache: FastCache,
        settings: Settings,
    ) -> None:
        self._remote = remote
        self._store = store
        self._cache = cache
        self._settings = settings

    async def _fetch_all(self, limit: int | None) -> tuple[list[ContentItem], list[ContentItem]]:
        try:
            async with asyncio.timeout(self._settings.sync_timeout_seconds):
                article_rows = await self._remote.fetch_rows("article", limit)
                event_rows = await self._remote.fetch_rows("event", limit)
        except TimeoutError as e:
            raise RemoteUnavailableError("Content database did not respond in time.") from e
        return (
            [article_row_to_item(row) for row in article_rows],
            [event_row_to_item(row) for row in event_rows],
        )

    async def export_items(self, limit: int | None = None) -> list[ContentItem]:
        """Articles followed by events, in the shape written to the fallback file.

        Raises:
            RemoteSourceError: When the Remote Source cannot be read.
        """
        articles, events = await self._fetch_all(limit)
        return articles + events

    async def sync_all(self, limit: int | None = None) -> SyncResult:
        """Overwrite the Fallback Store with every row and clear the Fast Cache.

        A Remote Source failure aborts before anything is written. A failed
        file write is logged and reported through ``file_written``; the Fast
        Cache is still cleared so the next read goes back to the Remote Source.

        Raises:
            RemoteSourceError: When the Remote Source cannot be read.
        """
        articles, events = await self._fetch_all(limit)
        logger.info(
            "Fetched content for sync",
            extra={"articles": len(articles), "events": len(events)},
        )

        file_written = True
        try:
            await self._store.save(articles + events)
        except FallbackWriteError as exc:
            file_written = False
            logger.warning("Sync could not write fallback file", extra={"error": str(exc)})

        self._cache.clear()
        return SyncResult(articles=len(articles), events=len(events), file_written=file_written)

    async def sync_item(self, item_id: str, kind: ContentKind) -> ItemSyncAction:
        """Patch one row into the Fallback Store.

        An existing entry is replaced in place, a new one is inserted at the
        front, and an id the Remote Source no longer has is removed.

        Raises:
            RemoteSourceError: When the row cannot be read.
            FallbackWriteError: When the file cannot be rewritten.
        """
        try:
            async with asyncio.timeout(self._settings.remote_timeout_seconds):
                row = await self._remote.fetch_row(kind, item_id)
        except TimeoutError as e:
            raise RemoteUnavailableError("Content database did not respond in time.") from e

        items = await self._store.load()
        index = next((i for i, item in enumerate(items) if item.id == item_id), None)

        action: ItemSyncAction
        if row is None:
            items = [item for item in items if item.id != item_id]
            action = "removed"
        else:
            fresh = event_row_to_item(row) if kind == "event" else article_row_to_item(row)
            if index is None:
                items.insert(0, fresh)
                action = "inserted"
            else:
                items[index] = fresh
                action = "patched"

        await self._store.save(items)
        self._cache.clear()
        logger.info(
            "Synced single item", extra={"item_id": item_id, "kind": kind, "action": action}
        )
        return action
