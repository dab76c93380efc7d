from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.content.slug import matches_slug, slugify

CONTENT_TYPE_ARTICLE = "article"
CONTENT_TYPE_EVENT = "event"
STATUS_PUBLISHED = "published"

_STRING_DEFAULTS = {
    "title": "",
    "excerpt": "",
    "category": "",
    "location": "",
    "author": "",
    "type": CONTENT_TYPE_ARTICLE,
    "status": STATUS_PUBLISHED,
    "image_url": "",
}

_FLAG_FIELDS = (
    "trending_home",
    "trending_edmonton",
    "trending_calgary",
    "featured_home",
    "featured_edmonton",
    "featured_calgary",
)


class ContentItem(BaseModel):
    """Unified article/event record held by the fallback snapshot and the fast cache."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    title: str = ""
    slug: str | None = None
    content: str | None = None
    excerpt: str = ""
    description: str | None = None
    category: str = ""
    categories: list[str] = Field(default_factory=list)
    location: str = ""
    author: str = ""
    tags: list[str] = Field(default_factory=list)
    type: str = CONTENT_TYPE_ARTICLE
    status: str = STATUS_PUBLISHED
    image_url: str = ""

    trending_home: bool = False
    trending_edmonton: bool = False
    trending_calgary: bool = False
    featured_home: bool = False
    featured_edmonton: bool = False
    featured_calgary: bool = False

    date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    # Event-only fields
    event_date: str | None = None
    event_end_date: str | None = None
    organizer: str | None = None
    organizer_contact: str | None = None
    website_url: str | None = None
    venue_address: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator(*_STRING_DEFAULTS, mode="before")
    @classmethod
    def default_missing_strings(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return _STRING_DEFAULTS[info.field_name]
        return value

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def default_missing_lists(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value else []
        return value

    @field_validator(*_FLAG_FIELDS, mode="before")
    @classmethod
    def default_missing_flags(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def is_event(self) -> bool:
        return self.type == CONTENT_TYPE_EVENT

    @property
    def is_published(self) -> bool:
        return not self.status or self.status == STATUS_PUBLISHED

    @property
    def url_slug(self) -> str:
        return self.slug or slugify(self.title)

    def matches_slug(self, slug: str) -> bool:
        return matches_slug(slug, title=self.title, persisted_slug=self.slug)

    def has_usable_content(self, threshold: int) -> bool:
        return bool(self.content) and len(self.content.strip()) >= threshold

    def to_store(self) -> dict[str, Any]:
        """Serialise to the camelCase shape written to the fallback file."""
        return self.model_dump(by_alias=True, exclude_none=True)
