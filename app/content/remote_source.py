"""Remote Source adapter: the hosted Postgres database that is authoritative for content."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import Select, delete, func, inspect, or_, select
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.content.slug import slugify
from app.db.models.article import Article
from app.db.models.event import Event

ContentKind = Literal["article", "event"]
SortKey = Literal["newest", "oldest", "title", "event_date"]

_MODELS: dict[str, type[Article] | type[Event]] = {"article": Article, "event": Event}
# Column holding the long-form body; left out of preview and list projections.
_BODY_COLUMN: dict[str, str] = {"article": "content", "event": "description"}

logger = logging.getLogger(__name__)


class RemoteSourceError(Exception):
    """Base error raised when the Remote Source cannot fulfil a request."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class RemoteUnavailableError(RemoteSourceError):
    """Remote Source is unreachable or timed out."""

    def __init__(
        self, message: str = "Content database is unavailable. Try again shortly."
    ) -> None:
        super().__init__(message, "remote_unavailable")


class RemoteNotFoundError(RemoteSourceError):
    """The requested row does not exist in the Remote Source."""

    def __init__(self, message: str = "Content not found") -> None:
        super().__init__(message, "not_found")


class RemoteWriteError(RemoteSourceError):
    """An insert, update or delete was rejected by the Remote Source."""

    def __init__(self, message: str = "Failed to write content to the database.") -> None:
        super().__init__(message, "remote_write_failed")


@dataclass(frozen=True)
class ListQuery:
    """Admin list parameters (already clamped by the API layer)."""

    page: int = 1
    limit: int = 10
    search: str = ""
    category: str = ""
    location: str = ""
    status: str = ""
    sort_by: SortKey = "newest"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ListResult:
    rows: list[dict[str, Any]]
    total: int


class RemoteSource(ABC):
    """Abstract Remote Source; rows are plain dicts keyed by snake_case column names."""

    @abstractmethod
    async def fetch_rows(self, kind: ContentKind, limit: int | None = None) -> list[dict[str, Any]]:
        """All rows of a table, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_row(self, kind: ContentKind, item_id: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    async def fetch_content(self, kind: ContentKind, item_id: str) -> str | None:
        """Only the long-form body of one row."""
        raise NotImplementedError

    @abstractmethod
    async def find_published_by_slug(
        self, kind: ContentKind, slug: str, scan_limit: int
    ) -> dict[str, Any] | None:
        """Preview projection (no body) of the published row whose slug matches."""
        raise NotImplementedError

    @abstractmethod
    async def list_rows(self, kind: ContentKind, query: ListQuery) -> ListResult:
        raise NotImplementedError

    @abstractmethod
    async def create_row(self, kind: ContentKind, values: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def update_row(
        self, kind: ContentKind, item_id: str, values: dict[str, Any]
    ) -> dict[str, Any]:
        """Raises RemoteNotFoundError when the id does not exist."""
        raise NotImplementedError

    @abstractmethod
    async def delete_row(self, kind: ContentKind, item_id: str) -> None:
        """Raises RemoteNotFoundError when the id does not exist."""
        raise NotImplementedError


def _column_names(model: type[Article] | type[Event]) -> list[str]:
    return [attr.key for attr in inspect(model).mapper.column_attrs]


def _to_dict(obj: Article | Event) -> dict[str, Any]:
    return {name: getattr(obj, name) for name in _column_names(type(obj))}


class SqlAlchemyRemoteSource(RemoteSource):
    """Remote Source backed by SQLAlchemy async sessions (asyncpg against Supabase Postgres)."""

    def __init__(
        self, session_maker_provider: Callable[[], async_sessionmaker[AsyncSession]]
    ) -> None:
        self._session_maker_provider = session_maker_provider

    def _session(self) -> AsyncSession:
        return self._session_maker_provider()()

    def _handle_errors(self, error: Exception, *, write: bool) -> RemoteSourceError:
        """Log the failure and map it onto the RemoteSourceError hierarchy."""
        if isinstance(error, (OperationalError, InterfaceError, OSError, TimeoutError)):
            logger.error(f"Remote Source connection failed. Error: {error}")
            return RemoteUnavailableError()
        if isinstance(error, DBAPIError) and error.connection_invalidated:
            logger.error(f"Remote Source connection invalidated. Error: {error}")
            return RemoteUnavailableError()
        if isinstance(error, (IntegrityError, DataError)):
            logger.error(f"Remote Source rejected write. Error: {error}")
            return RemoteWriteError()
        if isinstance(error, SQLAlchemyError):
            logger.error(f"Remote Source query failed. Error: {error}")
            return RemoteWriteError() if write else RemoteUnavailableError()
        logger.error(f"Unexpected Remote Source error. Error: {error}")
        return RemoteSourceError("Content database request failed.", "remote_error")

    @staticmethod
    def _preview_columns(kind: ContentKind) -> list[Any]:
        model = _MODELS[kind]
        body = _BODY_COLUMN[kind]
        return [getattr(model, name) for name in _column_names(model) if name != body]

    async def fetch_rows(self, kind: ContentKind, limit: int | None = None) -> list[dict[str, Any]]:
        model = _MODELS[kind]
        stmt = select(model).order_by(model.created_at.desc(), model.id)
        if limit is not None and limit > 0:
            stmt = stmt.limit(limit)
        try:
            async with self._session() as session:
                result = await session.execute(stmt)
                return [_to_dict(obj) for obj in result.scalars().all()]
        except Exception as e:
            raise self._handle_errors(e, write=False) from e

    async def fetch_row(self, kind: ContentKind, item_id: str) -> dict[str, Any] | None:
        try:
            async with self._session() as session:
                obj = await session.get(_MODELS[kind], item_id)
                return _to_dict(obj) if obj is not None else None
        except Exception as e:
            raise self._handle_errors(e, write=False) from e

    async def fetch_content(self, kind: ContentKind, item_id: str) -> str | None:
        model = _MODELS[kind]
        body_column = getattr(model, _BODY_COLUMN[kind])
        try:
            async with self._session() as session:
                result = await session.execute(select(body_column).where(model.id == item_id))
                return result.scalar_one_or_none()
        except Exception as e:
            raise self._handle_errors(e, write=False) from e

    async def find_published_by_slug(
        self, kind: ContentKind, slug: str, scan_limit: int
    ) -> dict[str, Any] | None:
        model = _MODELS[kind]
        columns = self._preview_columns(kind)
        published = select(*columns).where(model.status == "published")
        try:
            async with self._session() as session:
                if kind == "article":
                    result = await session.execute(published.where(Article.slug == slug).limit(1))
                    row = result.first()
                    if row is not None:
                        return dict(row._mapping)

                recent = published.order_by(model.created_at.desc(), model.id).limit(scan_limit)
                result = await session.execute(recent)
                for row in result:
                    if slugify(row._mapping["title"]) == slug:
                        return dict(row._mapping)
                return None
        except Exception as e:
            raise self._handle_errors(e, write=False) from e

    def _apply_list_filters(
        self, kind: ContentKind, stmt: Select[Any], query: ListQuery
    ) -> Select[Any]:
        model = _MODELS[kind]
        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(or_(model.title.ilike(pattern), model.excerpt.ilike(pattern)))
        if query.category and query.category != "all":
            stmt = stmt.where(func.lower(model.category) == query.category.lower())
        if query.location and query.location != "all":
            stmt = stmt.where(model.location.ilike(f"%{query.location}%"))
        if query.status and query.status != "all":
            stmt = stmt.where(model.status == query.status)
        return stmt

    @staticmethod
    def _order_by(kind: ContentKind, sort_by: SortKey) -> list[Any]:
        model = _MODELS[kind]
        if sort_by == "oldest":
            return [model.created_at.asc(), model.id]
        if sort_by == "title":
            return [model.title.asc(), model.id]
        if sort_by == "event_date" and kind == "event":
            return [Event.event_date.asc(), Event.id]
        return [model.created_at.desc(), model.id]

    async def list_rows(self, kind: ContentKind, query: ListQuery) -> ListResult:
        filtered = self._apply_list_filters(kind, select(*self._preview_columns(kind)), query)
        count_stmt = select(func.count()).select_from(filtered.subquery())
        page_stmt = (
            filtered.order_by(*self._order_by(kind, query.sort_by))
            .offset(query.offset)
            .limit(query.limit)
        )
        try:
            async with self._session() as session:
                total = (await session.execute(count_stmt)).scalar_one()
                result = await session.execute(page_stmt)
                return ListResult(rows=[dict(row._mapping) for row in result], total=total)
        except Exception as e:
            raise self._handle_errors(e, write=False) from e

    @staticmethod
    def _known_values(kind: ContentKind, values: dict[str, Any]) -> dict[str, Any]:
        columns = set(_column_names(_MODELS[kind]))
        return {key: value for key, value in values.items() if key in columns}

    async def create_row(self, kind: ContentKind, values: dict[str, Any]) -> dict[str, Any]:
        obj = _MODELS[kind](**self._known_values(kind, values))
        try:
            async with self._session() as session:
                session.add(obj)
                await session.commit()
                await session.refresh(obj)
                return _to_dict(obj)
        except Exception as e:
            raise self._handle_errors(e, write=True) from e

    async def update_row(
        self, kind: ContentKind, item_id: str, values: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            async with self._session() as session:
                obj = await session.get(_MODELS[kind], item_id)
                if obj is None:
                    raise RemoteNotFoundError(f"{kind.capitalize()} {item_id} not found")
                for key, value in self._known_values(kind, values).items():
                    setattr(obj, key, value)
                await session.commit()
                await session.refresh(obj)
                return _to_dict(obj)
        except RemoteSourceError:
            raise
        except Exception as e:
            raise self._handle_errors(e, write=True) from e

    async def delete_row(self, kind: ContentKind, item_id: str) -> None:
        model = _MODELS[kind]
        try:
            async with self._session() as session:
                result = await session.execute(delete(model).where(model.id == item_id))
                if result.rowcount == 0:
                    raise RemoteNotFoundError(f"{kind.capitalize()} {item_id} not found")
                await session.commit()
        except RemoteSourceError:
            raise
        except Exception as e:
            raise self._handle_errors(e, write=True) from e
