"""Integration tests for organisation news."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from tests.conftest import Tenant

ARTICLE = {"title": "Quarterly results", "subtitle": "Q3 in review", "content": "Revenue grew again."}


async def _publish(client: AsyncClient, tenant: Tenant, **overrides) -> dict:
    response = await client.post("/api/v1/news", json={**ARTICLE, **overrides}, headers=tenant.headers("user"))
    assert response.status_code == 201, response.text
    return response.json()


class TestNews:
    @pytest.mark.asyncio
    async def test_create_defaults(self, client: AsyncClient, tenant: Tenant) -> None:
        article = await _publish(client, tenant)
        assert article["status"] == "active"
        assert article["category"] == "news"
        assert article["author"]["id"] == tenant.users["user"].id
        assert article["publishing_date"] is not None

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post("/api/v1/news", json={**ARTICLE, "title": ""}, headers=tenant.headers("user"))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_newest_first(self, client: AsyncClient, tenant: Tenant) -> None:
        first = await _publish(client, tenant, title="First")
        second = await _publish(client, tenant, title="Second")
        response = await client.get("/api/v1/news", headers=tenant.headers("admin"))
        assert [a["id"] for a in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_update(self, client: AsyncClient, tenant: Tenant) -> None:
        article = await _publish(client, tenant)
        response = await client.patch(
            f"/api/v1/news/{article['id']}",
            json={"category": "announcement", "title": None},
            headers=tenant.headers("admin"),
        )
        assert response.json()["category"] == "announcement"
        assert response.json()["title"] == ARTICLE["title"]

    @pytest.mark.asyncio
    async def test_delete_requires_staff(self, client: AsyncClient, tenant: Tenant) -> None:
        article = await _publish(client, tenant)
        denied = await client.delete(f"/api/v1/news/{article['id']}", headers=tenant.headers("user"))
        assert denied.status_code == 403

        response = await client.delete(f"/api/v1/news/{article['id']}", headers=tenant.headers("admin"))
        assert response.json() == {"message": "News article deleted"}
        missing = await client.get(f"/api/v1/news/{article['id']}", headers=tenant.headers("admin"))
        assert missing.status_code == 404
        assert missing.json()["detail"] == "News article not found"

    @pytest.mark.asyncio
    async def test_isolated_between_organisations(
        self, client: AsyncClient, tenant: Tenant, other_tenant: Tenant
    ) -> None:
        article = await _publish(client, tenant)
        assert (await client.get("/api/v1/news", headers=other_tenant.headers("user"))).json() == []
        response = await client.get(f"/api/v1/news/{article['id']}", headers=other_tenant.headers("admin"))
        assert response.status_code == 404
