"""Request models for admin API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.api.schemas.camel import CamelModel

ContentStatus = Literal["draft", "published", "archived"]


class AdminLoginRequest(BaseModel):
    """Request model for admin login."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"username": "admin", "password": "Password123!"}]}
    )

    username: str = Field(..., min_length=1, max_length=200, examples=["admin"])
    password: str = Field(..., min_length=1, max_length=72, examples=["Password123!"])

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate that password does not exceed 72 bytes when UTF-8 encoded."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must not exceed 72 bytes when UTF-8 encoded")
        return v


class ArticleFields(CamelModel):
    """Article fields accepted from the dashboard; unset fields are left untouched."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: str | None = None
    excerpt: str | None = None
    description: str | None = None
    category: str | None = Field(default=None, max_length=200)
    categories: list[str] | None = None
    location: str | None = Field(default=None, max_length=200)
    author: str | None = Field(default=None, max_length=200)
    tags: list[str] | None = None
    type: str | None = Field(default=None, max_length=50)
    status: ContentStatus | None = None
    image_url: str | None = None
    trending_home: bool | None = None
    trending_edmonton: bool | None = None
    trending_calgary: bool | None = None
    featured_home: bool | None = None
    featured_edmonton: bool | None = None
    featured_calgary: bool | None = None


class ArticleCreateRequest(ArticleFields):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Spring Adventures in Banff",
                    "content": "Banff in spring is ...",
                    "category": "Travel",
                    "location": "Banff",
                    "status": "published",
                }
            ]
        }
    )

    title: str = Field(..., min_length=1, max_length=500)


class ArticleUpdateRequest(ArticleFields):
    pass


class EventFields(CamelModel):
    """Event fields accepted from the dashboard; unset fields are left untouched."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    excerpt: str | None = None
    category: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    venue_address: str | None = Field(default=None, max_length=500)
    organizer: str | None = Field(default=None, max_length=200)
    organizer_contact: str | None = Field(default=None, max_length=200)
    website_url: str | None = None
    tags: list[str] | None = None
    status: ContentStatus | None = None
    image_url: str | None = None
    event_date: datetime | None = None
    event_end_date: datetime | None = None
    featured_home: bool | None = None
    featured_edmonton: bool | None = None
    featured_calgary: bool | None = None


class EventCreateRequest(EventFields):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Calgary Folk Festival",
                    "description": "Four days of music on Prince's Island.",
                    "location": "Calgary",
                    "eventDate": "2026-07-23T18:00:00Z",
                }
            ]
        }
    )

    title: str = Field(..., min_length=1, max_length=500)


class EventUpdateRequest(EventFields):
    pass


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1, max_length=500, examples=[["abc123", "def456"]])
