"""Integration tests for the admin article and event endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI, status
from httpx import AsyncClient

from app.api.schemas import AdminListResponse, BulkDeleteResponse, MutationResponse
from app.content.fallback_store import FallbackStore
from app.content.models import ContentItem
from app.content.remote_source import RemoteUnavailableError, RemoteWriteError


class TestAdminArticles:
    """Test article CRUD through the API."""

    @pytest.mark.asyncio
    async def test_create_get_update_delete(
        self,
        async_http_client: AsyncClient,
        admin_headers: dict[str, str],
        store: FallbackStore,
    ) -> None:
        """Test the full article lifecycle and the fallback file following along."""
        # Create
        response = await async_http_client.post(
            "/api/admin/articles",
            json={"title": "Spring in Banff", "content": "Body", "imageUrl": "/banff.jpg"},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_201_CREATED
        created = MutationResponse.model_validate(response.json())
        assert created.item is not None
        assert created.reconciliation == "patched"
        assert response.json()["item"]["imageUrl"] == "/banff.jpg"
        article_id = created.item.id
        assert [item.id for item in await store.load()] == [article_id]

        # Get
        response = await async_http_client.get(
            f"/api/admin/articles/{article_id}", headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["slug"] == "spring-in-banff"

        # Update
        response = await async_http_client.put(
            f"/api/admin/articles/{article_id}",
            json={"title": "Summer in Banff", "featuredHome": True},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        updated = MutationResponse.model_validate(response.json())
        assert updated.item is not None and updated.item.featured_home is True
        stored = (await store.load())[0]
        assert stored.title == "Summer in Banff"
        assert stored.slug == "spring-in-banff"
        response = await async_http_client.get("/api/articles/spring-in-banff")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["article"]["id"] == article_id

        # Delete
        response = await async_http_client.delete(
            f"/api/admin/articles/{article_id}", headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["item"] is None
        assert await store.load() == []

        response = await async_http_client.delete(
            f"/api/admin/articles/{article_id}", headers=admin_headers
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "not_found"

        # Public lookup no longer resolves the deleted article
        response = await async_http_client.get("/api/articles/spring-in-banff")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_create_requires_title(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        """Test that a create without a title is rejected."""
        response = await async_http_client.post(
            "/api/admin/articles", json={"content": "Body"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_remote_write_failure_is_bad_gateway(
        self,
        async_http_client: AsyncClient,
        admin_headers: dict[str, str],
        remote: Any,
        store: FallbackStore,
    ) -> None:
        """Test that a rejected write surfaces as 502 and leaves the file alone."""
        remote.write_error = RemoteWriteError()

        response = await async_http_client.post(
            "/api/admin/articles", json={"title": "Nope"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["error"] == "remote_write_failed"
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_remote_outage_on_get_is_unavailable(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str], remote: Any
    ) -> None:
        """Test that a read during an outage with no fallback copy is a 503."""
        remote.read_error = RemoteUnavailableError()

        response = await async_http_client.get("/api/admin/articles/a1", headers=admin_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "remote_unavailable"

    @pytest.mark.asyncio
    async def test_list_pagination_and_fallback(
        self,
        async_http_client: AsyncClient,
        admin_headers: dict[str, str],
        remote: Any,
        store: FallbackStore,
    ) -> None:
        """Test the remote list, then the fallback list during an outage."""
        # Arrange
        for i in range(3):
            remote.add("article", title=f"Article {i}", content="Body")

        # Act
        response = await async_http_client.get(
            "/api/admin/articles", params={"page": 1, "limit": 2}, headers=admin_headers
        )

        # Assert
        assert response.status_code == status.HTTP_200_OK
        listing = AdminListResponse.model_validate(response.json())
        assert (listing.total, listing.total_pages, listing.source) == (3, 2, "remote")
        assert [item.title for item in listing.items] == ["Article 2", "Article 1"]
        assert "totalPages" in response.json()

        # Arrange
        await store.save([ContentItem(id="f1", title="From File", content="Body")])
        remote.read_error = RemoteUnavailableError()

        # Act
        response = await async_http_client.get("/api/admin/articles", headers=admin_headers)

        # Assert
        listing = AdminListResponse.model_validate(response.json())
        assert listing.source == "fallback"
        assert [item.id for item in listing.items] == ["f1"]
        assert listing.items[0].content is None

    @pytest.mark.asyncio
    async def test_list_limit_is_bounded(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        """Test that page sizes above 100 are rejected."""
        response = await async_http_client.get(
            "/api/admin/articles", params={"limit": 101}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    @pytest.mark.asyncio
    async def test_refresh_clears_fast_cache(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str], async_app: FastAPI
    ) -> None:
        """Test that refresh=true drops the Fast Cache."""
        cache = async_app.state.services["fast_cache"]
        await cache.get_items()

        response = await async_http_client.get(
            "/api/admin/articles", params={"refresh": "true"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert not cache.is_loaded

    @pytest.mark.asyncio
    async def test_bulk_delete(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str], remote: Any
    ) -> None:
        """Test that bulk delete reports deleted and unknown ids."""
        first = remote.add("article", title="First")
        second = remote.add("article", title="Second")

        response = await async_http_client.request(
            "DELETE",
            "/api/admin/articles",
            json={"ids": [first["id"], "missing", second["id"]]},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        result = BulkDeleteResponse.model_validate(response.json())
        assert result.deleted == [first["id"], second["id"]]
        assert result.not_found == ["missing"]
        assert remote.tables["article"] == {}

    @pytest.mark.asyncio
    async def test_bulk_delete_requires_ids(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        """Test that an empty id list is rejected."""
        response = await async_http_client.request(
            "DELETE", "/api/admin/articles", json={"ids": []}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


class TestAdminEvents:
    """Test event CRUD through the API."""

    @pytest.mark.asyncio
    async def test_create_and_list_events(
        self,
        async_http_client: AsyncClient,
        admin_headers: dict[str, str],
        store: FallbackStore,
    ) -> None:
        """Test that events are created as type=event items and listed by event date."""
        # Arrange
        for title, when in [("Later", "2026-08-01T18:00:00Z"), ("Sooner", "2026-07-01T18:00:00Z")]:
            response = await async_http_client.post(
                "/api/admin/events",
                json={"title": title, "description": "Live music", "eventDate": when},
                headers=admin_headers,
            )
            assert response.status_code == status.HTTP_201_CREATED
            assert response.json()["item"]["type"] == "event"
            assert response.json()["item"]["eventDate"].startswith(when[:10])

        # Act
        response = await async_http_client.get(
            "/api/admin/events", params={"sortBy": "oldest"}, headers=admin_headers
        )

        # Assert
        assert response.status_code == status.HTTP_200_OK
        assert [item["title"] for item in response.json()["items"]] == ["Later", "Sooner"]
        assert all(item.is_event for item in await store.load())

    @pytest.mark.asyncio
    async def test_update_event(
        self, async_http_client: AsyncClient, admin_headers: dict[str, str], remote: Any
    ) -> None:
        """Test that an event update is written to the Remote Source."""
        row = remote.add("event", title="Festival")

        response = await async_http_client.put(
            f"/api/admin/events/{row['id']}",
            json={"venueAddress": "Prince's Island Park"},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert remote.tables["event"][row["id"]]["venue_address"] == "Prince's Island Park"
        assert response.json()["item"]["venueAddress"] == "Prince's Island Park"
