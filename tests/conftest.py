"""Pytest configuration and shared fixtures.

Settings are validated when ``app.core.config`` is first imported, so the
required environment is put in place before any ``app`` import.
"""

from __future__ import annotations

import asyncio
import os
import types
import uuid
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from passlib.context import CryptContext

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "Banff-Spring-2026!"

os.environ.setdefault("POSTGRES_USER", "culture")
os.environ.setdefault("POSTGRES_PASSWORD", "culture")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("POSTGRES_DB", "culture_alberta")
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "Test-Secret-Key-For-Culture-Alberta-2026!"
os.environ["ADMIN_USERNAME"] = ADMIN_USERNAME
os.environ["ADMIN_PASSWORD_HASH"] = CryptContext(schemes=["bcrypt"]).hash(ADMIN_PASSWORD)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.content.fallback_store import FallbackStore  # noqa: E402
from app.content.fast_cache import FastCache  # noqa: E402
from app.content.remote_source import (  # noqa: E402
    ContentKind,
    ListQuery,
    ListResult,
    RemoteNotFoundError,
    RemoteSource,
    RemoteSourceError,
)
from app.content.slug import slugify  # noqa: E402
from app.core import config  # noqa: E402
from app.core.auth import create_admin_token  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.main import build_services, create_app  # noqa: E402
from app.services.admin_content_service import AdminContentService  # noqa: E402
from app.services.resolution_service import ContentResolver  # noqa: E402
from app.services.sync_service import SyncService  # noqa: E402

_BODY = {"article": "content", "event": "description"}
_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


class InMemoryRemoteSource(RemoteSource):
    """Remote Source fake holding rows in dicts.

    ``read_error`` / ``write_error`` make every read or write raise, and
    ``delay`` makes every call sleep first so timeouts can be exercised.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {"article": {}, "event": {}}
        self.read_error: RemoteSourceError | None = None
        self.write_error: RemoteSourceError | None = None
        self.delay: float = 0.0
        self.calls: list[str] = []
        self._clock = 0

    def _tick(self) -> datetime:
        self._clock += 1
        return _EPOCH + timedelta(minutes=self._clock)

    def add(self, kind: ContentKind, **values: Any) -> dict[str, Any]:
        """Seed a row directly, bypassing failure injection."""
        row: dict[str, Any] = {"id": str(uuid.uuid4()), "status": "published", **values}
        row.setdefault("created_at", self._tick())
        row.setdefault("updated_at", row["created_at"])
        self.tables[kind][row["id"]] = row
        return dict(row)

    async def _enter(self, operation: str, *, write: bool = False) -> None:
        self.calls.append(operation)
        if self.delay:
            await asyncio.sleep(self.delay)
        error = self.write_error if write else self.read_error
        if error is not None:
            raise error

    def _newest_first(self, kind: ContentKind) -> list[dict[str, Any]]:
        rows = sorted(self.tables[kind].values(), key=lambda row: row["id"])
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return rows

    async def fetch_rows(self, kind: ContentKind, limit: int | None = None) -> list[dict[str, Any]]:
        await self._enter(f"fetch_rows:{kind}")
        rows = self._newest_first(kind)
        return [dict(row) for row in (rows[:limit] if limit else rows)]

    async def fetch_row(self, kind: ContentKind, item_id: str) -> dict[str, Any] | None:
        await self._enter(f"fetch_row:{kind}")
        row = self.tables[kind].get(item_id)
        return dict(row) if row is not None else None

    async def fetch_content(self, kind: ContentKind, item_id: str) -> str | None:
        await self._enter(f"fetch_content:{kind}")
        row = self.tables[kind].get(item_id)
        return row.get(_BODY[kind]) if row is not None else None

    async def find_published_by_slug(
        self, kind: ContentKind, slug: str, scan_limit: int
    ) -> dict[str, Any] | None:
        await self._enter(f"find_published_by_slug:{kind}")
        published = [row for row in self._newest_first(kind) if row.get("status") == "published"]
        for row in published:
            if row.get("slug") == slug:
                return {k: v for k, v in row.items() if k != _BODY[kind]}
        for row in published[:scan_limit]:
            if slugify(row.get("title")) == slug:
                return {k: v for k, v in row.items() if k != _BODY[kind]}
        return None

    async def list_rows(self, kind: ContentKind, query: ListQuery) -> ListResult:
        await self._enter(f"list_rows:{kind}")
        rows = self._newest_first(kind)
        if query.search:
            rows = [row for row in rows if query.search.lower() in row.get("title", "").lower()]
        if query.status and query.status != "all":
            rows = [row for row in rows if row.get("status") == query.status]
        if query.sort_by == "oldest":
            rows.reverse()
        page = rows[query.offset : query.offset + query.limit]
        return ListResult(
            rows=[{k: v for k, v in row.items() if k != _BODY[kind]} for row in page],
            total=len(rows),
        )

    async def create_row(self, kind: ContentKind, values: dict[str, Any]) -> dict[str, Any]:
        await self._enter(f"create_row:{kind}", write=True)
        return self.add(kind, **values)

    async def update_row(
        self, kind: ContentKind, item_id: str, values: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter(f"update_row:{kind}", write=True)
        row = self.tables[kind].get(item_id)
        if row is None:
            raise RemoteNotFoundError(f"{kind.capitalize()} {item_id} not found")
        row.update(values)
        row["updated_at"] = self._tick()
        return dict(row)

    async def delete_row(self, kind: ContentKind, item_id: str) -> None:
        await self._enter(f"delete_row:{kind}", write=True)
        if self.tables[kind].pop(item_id, None) is None:
            raise RemoteNotFoundError(f"{kind.capitalize()} {item_id} not found")


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    """Rate limit counters are process-wide; start every test from zero."""
    limiter.reset()


@pytest.fixture
def remote() -> InMemoryRemoteSource:
    return InMemoryRemoteSource()


@pytest.fixture
def store(tmp_path: Path) -> FallbackStore:
    return FallbackStore(
        tmp_path / "optimized-fallback.json", tmp_path / "lib" / "data" / "articles.json"
    )


@pytest.fixture
def cache(store: FallbackStore) -> FastCache:
    return FastCache(store.load_legacy)


@pytest.fixture
def test_settings() -> config.Settings:
    """Settings copy with short timeouts so timeout paths run quickly."""
    return config.settings.model_copy(
        update={"remote_timeout_seconds": 0.05, "sync_timeout_seconds": 0.2}
    )


@pytest.fixture
def resolver(
    remote: InMemoryRemoteSource,
    store: FallbackStore,
    cache: FastCache,
    test_settings: config.Settings,
) -> ContentResolver:
    return ContentResolver(remote, store, cache, test_settings)


@pytest.fixture
def sync_service(
    remote: InMemoryRemoteSource,
    store: FallbackStore,
    cache: FastCache,
    test_settings: config.Settings,
) -> SyncService:
    return SyncService(remote, store, cache, test_settings)


@pytest.fixture
def admin_service(
    remote: InMemoryRemoteSource,
    store: FallbackStore,
    cache: FastCache,
    sync_service: SyncService,
) -> AdminContentService:
    return AdminContentService(remote, store, cache, sync_service)


@pytest.fixture
def async_app(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, remote: InMemoryRemoteSource
) -> FastAPI:
    """FastAPI app wired to the in-memory Remote Source and a temporary fallback file."""
    monkeypatch.setattr(config.settings, "environment", "test")
    monkeypatch.setattr(
        config.settings, "fallback_path", str(tmp_path / "optimized-fallback.json")
    )
    monkeypatch.setattr(
        config.settings, "legacy_fallback_path", str(tmp_path / "lib" / "data" / "articles.json")
    )
    fastapi_app = create_app()
    fastapi_app.state.services = types.MappingProxyType(build_services(remote))
    return fastapi_app


@pytest_asyncio.fixture
async def async_http_client(async_app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Creates an async http client."""
    transport = ASGITransport(app=async_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_admin_token(ADMIN_USERNAME)}"}


@pytest.fixture
def admin_password() -> str:
    """Plain-text password matching ADMIN_PASSWORD_HASH."""
    return ADMIN_PASSWORD
