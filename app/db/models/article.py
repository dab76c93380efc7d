from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, StringList


def _new_id() -> str:
    return str(uuid.uuid4())


class Article(Base):
    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(500))
    # Persisted at creation; title edits never rewrite it.
    slug: Mapped[str | None] = mapped_column(String(120), index=True, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(200), nullable=True)
    categories: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    type: Mapped[str | None] = mapped_column(String(50), default="article", nullable=True)
    status: Mapped[str | None] = mapped_column(
        String(20), default="published", index=True, nullable=True
    )
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    trending_home: Mapped[bool] = mapped_column(Boolean, default=False)
    trending_edmonton: Mapped[bool] = mapped_column(Boolean, default=False)
    trending_calgary: Mapped[bool] = mapped_column(Boolean, default=False)
    featured_home: Mapped[bool] = mapped_column(Boolean, default=False)
    featured_edmonton: Mapped[bool] = mapped_column(Boolean, default=False)
    featured_calgary: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
