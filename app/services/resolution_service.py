"""Resolution service - decides which layer serves a public content read."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable
from typing import Any, TypeVar

from app.content.fallback_store import FallbackStore
from app.content.fast_cache import FastCache
from app.content.models import CONTENT_TYPE_ARTICLE, ContentItem
from app.content.remote_source import ContentKind, RemoteSource, RemoteSourceError
from app.content.slug import normalize_slug
from app.content.transform import article_row_to_item, event_row_to_item
from app.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

RELATED_PER_GROUP = 3

PLACEHOLDER_ITEM = ContentItem(
    id="fallback-culture",
    title="Welcome to Culture",
    excerpt="Discover Alberta's rich cultural heritage, arts, and community stories.",
    content="We're working on bringing you amazing cultural content. Check back soon!",
    category="Culture",
    categories=["Culture"],
    location="Alberta",
    author="Culture Alberta",
    image_url="/images/culture-fallback.jpg",
    type=CONTENT_TYPE_ARTICLE,
    status="published",
)


def _row_to_item(kind: ContentKind, row: dict[str, Any]) -> ContentItem:
    if kind == "event":
        return event_row_to_item(row)
    return article_row_to_item(row)


def _is_kind(item: ContentItem, kind: ContentKind) -> bool:
    return item.is_event if kind == "event" else not item.is_event


def _same_category(a: ContentItem, b: ContentItem) -> bool:
    return a.category.casefold() == b.category.casefold()


def _sort_key(item: ContentItem) -> str:
    return item.date or item.created_at or ""


class ContentResolver:
    """Looks content up in the Fast Cache, then the Remote Source, then the Fallback Store.

    Downstream failures never propagate: a Remote Source error or timeout is
    logged and treated as a miss, and only exhausting every layer yields
    ``None`` (or an empty list) to the caller. Only published items are
    served.
    """

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

    async def _remote_call(self, awaitable: Awaitable[T], operation: str) -> T | None:
        try:
            async with asyncio.timeout(self._settings.remote_timeout_seconds):
                return await awaitable
        except TimeoutError:
            logger.warning(
                "Remote Source timed out",
                extra={"operation": operation, "timeout": self._settings.remote_timeout_seconds},
            )
        except RemoteSourceError as exc:
            logger.warning(
                "Remote Source lookup failed",
                extra={"operation": operation, "error_code": exc.error_code},
            )
        return None

    async def _find_by_slug(self, kind: ContentKind, slug: str) -> ContentItem | None:
        wanted = normalize_slug(slug)
        if not wanted:
            return None

        cached = await self._cache.find_by_slug(
            wanted, where=lambda item: _is_kind(item, kind) and item.is_published
        )
        if cached is not None:
            return cached

        row = await self._remote_call(
            self._remote.find_published_by_slug(kind, wanted, self._settings.slug_scan_limit),
            f"find_{kind}_by_slug",
        )
        if row is not None:
            return _row_to_item(kind, row)

        for item in await self._store.load():
            if _is_kind(item, kind) and item.is_published and item.matches_slug(wanted):
                logger.info("Served from fallback store", extra={"kind": kind, "slug": wanted})
                return item

        return None

    async def find_article_by_slug(self, slug: str) -> ContentItem | None:
        return await self._find_by_slug("article", slug)

    async def find_event_by_slug(self, slug: str) -> ContentItem | None:
        return await self._find_by_slug("event", slug)

    async def ensure_full_content(self, item: ContentItem) -> ContentItem:
        """Backfill a missing or truncated body.

        The Remote Source is asked for the body first, then the Fallback
        Store's copy. If neither has a non-empty body the item is returned
        unchanged, so short content is never cleared.
        """
        if item.has_usable_content(self._settings.full_content_threshold):
            return item

        kind: ContentKind = "event" if item.is_event else "article"
        content = await self._remote_call(
            self._remote.fetch_content(kind, item.id), "fetch_content"
        )
        if content and content.strip():
            return item.model_copy(update={"content": content})

        for stored in await self._store.load():
            if stored.id == item.id or stored.matches_slug(item.url_slug):
                if stored.content and stored.content.strip():
                    return item.model_copy(update={"content": stored.content})
                break

        return item

    async def get_related_articles(
        self,
        item: ContentItem,
        limit: int | None = None,
        rng: random.Random | None = None,
    ) -> list[ContentItem]:
        """Up to three same-category and three other-category articles, shuffled.

        Reads the Fallback Store only. The order is random; pass ``rng`` for a
        reproducible shuffle.
        """
        if limit is None:
            limit = self._settings.related_default_limit

        candidates = [
            candidate
            for candidate in await self._store.load()
            if candidate.id != item.id and not candidate.is_event and candidate.is_published
        ]
        same = [c for c in candidates if _same_category(c, item)]
        other = [c for c in candidates if not _same_category(c, item)]
        related = same[:RELATED_PER_GROUP] + other[:RELATED_PER_GROUP]
        (rng or random).shuffle(related)
        return [c.model_copy(update={"content": None}) for c in related[:limit]]

    async def _public_items(self) -> list[ContentItem]:
        items = await self._cache.get_items()
        if items:
            return items

        articles = await self._remote_call(self._remote.fetch_rows("article"), "fetch_articles")
        events = await self._remote_call(self._remote.fetch_rows("event"), "fetch_events")
        remote_items = [article_row_to_item(row) for row in articles or []]
        remote_items.extend(event_row_to_item(row) for row in events or [])
        if remote_items:
            return remote_items

        return await self._store.load()

    async def list_public_content(
        self,
        content_type: str | None = None,
        category: str | None = None,
        location: str | None = None,
        limit: int | None = None,
    ) -> list[ContentItem]:
        """Published items newest first, or the placeholder item when no layer has anything."""
        items = await self._public_items()
        if not items:
            logger.warning("No content available from any source; serving placeholder")
            return [PLACEHOLDER_ITEM]

        selected = [item for item in items if item.is_published]
        if content_type:
            selected = [item for item in selected if item.type == content_type]
        if category:
            wanted = category.casefold()
            selected = [
                item
                for item in selected
                if item.category.casefold() == wanted
                or any(c.casefold() == wanted for c in item.categories)
            ]
        if location:
            wanted_location = location.casefold()
            selected = [item for item in selected if wanted_location in item.location.casefold()]

        selected.sort(key=_sort_key, reverse=True)
        if limit is not None:
            selected = selected[:limit]
        return selected
