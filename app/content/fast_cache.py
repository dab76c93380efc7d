"""In-process copy of the flattened Content Item array (the Fast Cache)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.content.models import ContentItem

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[list[ContentItem]]]


class FastCache:
    """Holds the full item list for the life of the owning application.

    No TTL and no partial invalidation: ``clear()`` drops everything and the
    next read reloads through ``loader``. Concurrent cold reads may each call
    the loader; whichever finishes last wins.
    """

    def __init__(self, loader: Loader) -> None:
        self._loader = loader
        self._items: list[ContentItem] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._items is not None

    @property
    def size(self) -> int:
        return len(self._items) if self._items is not None else 0

    async def get_items(self) -> list[ContentItem]:
        if self._items is None:
            items = await self._loader()
            logger.info("Fast cache loaded", extra={"item_count": len(items)})
            self._items = items
        return self._items

    async def find_by_slug(
        self, slug: str, where: Callable[[ContentItem], bool] | None = None
    ) -> ContentItem | None:
        """First cached item matching ``slug`` and, when given, the ``where`` filter."""
        for item in await self.get_items():
            if item.matches_slug(slug) and (where is None or where(item)):
                return item
        return None

    def clear(self) -> None:
        self._items = None
        logger.info("Fast cache cleared")
