"""Translation between Remote Source rows (snake_case) and the flattened ContentItem shape."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from app.content.models import CONTENT_TYPE_ARTICLE, CONTENT_TYPE_EVENT, ContentItem

EVENT_EXCERPT_LENGTH = 150
DEFAULT_EVENT_AUTHOR = "Event Organizer"

ImageKind = Literal["absolute", "relative", "data", "missing"]

Row = Mapping[str, Any]

# camelCase admin payload key -> articles column
ARTICLE_FIELD_COLUMNS: dict[str, str] = {
    "title": "title",
    "content": "content",
    "excerpt": "excerpt",
    "description": "description",
    "category": "category",
    "categories": "categories",
    "location": "location",
    "author": "author",
    "tags": "tags",
    "type": "type",
    "status": "status",
    "imageUrl": "image_url",
    "trendingHome": "trending_home",
    "trendingEdmonton": "trending_edmonton",
    "trendingCalgary": "trending_calgary",
    "featuredHome": "featured_home",
    "featuredEdmonton": "featured_edmonton",
    "featuredCalgary": "featured_calgary",
}

EVENT_FIELD_COLUMNS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "content": "description",
    "excerpt": "excerpt",
    "category": "category",
    "location": "location",
    "venueAddress": "venue_address",
    "organizer": "organizer",
    "organizerContact": "organizer_contact",
    "websiteUrl": "website_url",
    "tags": "tags",
    "status": "status",
    "imageUrl": "image_url",
    "eventDate": "event_date",
    "eventEndDate": "event_end_date",
    "featuredHome": "featured_home",
    "featuredEdmonton": "featured_edmonton",
    "featuredCalgary": "featured_calgary",
}


def iso(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def article_row_to_item(row: Row) -> ContentItem:
    """Flatten an ``articles`` row into a ContentItem."""
    created_at = iso(row.get("created_at"))
    category = row.get("category") or ""
    return ContentItem(
        id=row["id"],
        title=row.get("title") or "",
        slug=row.get("slug") or None,
        content=row.get("content"),
        excerpt=row.get("excerpt") or "",
        description=row.get("description"),
        category=category,
        categories=row.get("categories") or ([category] if category else []),
        location=row.get("location") or "",
        author=row.get("author") or "",
        tags=row.get("tags") or [],
        type=row.get("type") or CONTENT_TYPE_ARTICLE,
        status=row.get("status") or "published",
        image_url=row.get("image_url") or row.get("image") or "",
        trending_home=bool(row.get("trending_home")),
        trending_edmonton=bool(row.get("trending_edmonton")),
        trending_calgary=bool(row.get("trending_calgary")),
        featured_home=bool(row.get("featured_home")),
        featured_edmonton=bool(row.get("featured_edmonton")),
        featured_calgary=bool(row.get("featured_calgary")),
        date=iso(row.get("date")) or created_at,
        created_at=created_at,
        updated_at=iso(row.get("updated_at")) or created_at,
    )


def _event_excerpt(row: Row) -> str:
    excerpt = row.get("excerpt")
    if excerpt:
        return str(excerpt)
    description = row.get("description")
    if description:
        return f"{str(description)[:EVENT_EXCERPT_LENGTH]}..."
    return ""


def event_row_to_item(row: Row) -> ContentItem:
    """Flatten an ``events`` row into a ContentItem (``type="event"``)."""
    created_at = iso(row.get("created_at"))
    event_date = iso(row.get("event_date"))
    category = row.get("category") or ""
    featured_home = bool(row.get("featured_home"))
    featured_edmonton = bool(row.get("featured_edmonton"))
    featured_calgary = bool(row.get("featured_calgary"))
    return ContentItem(
        id=row["id"],
        title=row.get("title") or "",
        content=row.get("description"),
        excerpt=_event_excerpt(row),
        description=row.get("description"),
        category=category,
        categories=[category] if category else [],
        location=row.get("location") or "",
        author=row.get("organizer") or DEFAULT_EVENT_AUTHOR,
        tags=row.get("tags") or [],
        type=CONTENT_TYPE_EVENT,
        status=row.get("status") or "published",
        image_url=row.get("image_url") or "",
        # Events have no trending columns; placement mirrors the featured flags.
        trending_home=featured_home,
        trending_edmonton=featured_edmonton,
        trending_calgary=featured_calgary,
        featured_home=featured_home,
        featured_edmonton=featured_edmonton,
        featured_calgary=featured_calgary,
        date=event_date or created_at,
        created_at=created_at,
        updated_at=iso(row.get("updated_at")) or created_at,
        event_date=event_date,
        event_end_date=iso(row.get("event_end_date")),
        organizer=row.get("organizer"),
        organizer_contact=row.get("organizer_contact"),
        website_url=row.get("website_url"),
        venue_address=row.get("venue_address"),
    )


def _payload_to_values(payload: Mapping[str, Any], columns: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in payload.items():
        column = columns.get(key)
        if column is None or value is None:
            continue
        values[column] = value
    return values


def article_values(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Map a camelCase admin payload onto ``articles`` column values, dropping unset fields."""
    return _payload_to_values(payload, ARTICLE_FIELD_COLUMNS)


def event_values(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Map a camelCase admin payload onto ``events`` column values, dropping unset fields."""
    return _payload_to_values(payload, EVENT_FIELD_COLUMNS)


def image_kind(url: str | None) -> ImageKind:
    """Classify an ``imageUrl`` so the rendering layer can pick how to display it."""
    if not url:
        return "missing"
    if url.startswith("data:"):
        return "data"
    if url.startswith(("http://", "https://", "//")):
        return "absolute"
    return "relative"
