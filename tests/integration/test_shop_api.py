"""Integration tests for the catalogue and the quotation workflow."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import FakeEmailProvider, Tenant, create_client, create_product


async def _seed_catalogue(db: AsyncSession, tenant: Tenant) -> tuple[int, int, int]:
    """A buyer plus one regular and one promoted product."""
    buyer = await create_client(db, tenant.organisation)
    drill = await create_product(db, tenant.organisation, name="Drill", sku="DRILL-1", price="100.00")
    saw = await create_product(
        db, tenant.organisation, name="Saw", sku="SAW-1", price="80.00", sale_price="60.00", status="special"
    )
    await db.commit()
    return buyer.id, drill.id, saw.id


async def _quote(client: AsyncClient, tenant: Tenant, buyer_id: int, items: list[dict]) -> dict:
    response = await client.post(
        "/api/v1/shop/quotation", json={"client_id": buyer_id, "items": items}, headers=tenant.headers("user")
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestProducts:
    @pytest.mark.asyncio
    async def test_generated_sku(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post(
            "/api/v1/shop/products",
            json={"name": "Widget", "category": "hardware", "price": "12.50"},
            headers=tenant.headers("admin"),
        )
        assert response.status_code == 201
        product = response.json()
        assert product["sku"] == f"HAR-WID-000-{str(product['id']).zfill(6)}"

    @pytest.mark.asyncio
    async def test_duplicate_sku(self, client: AsyncClient, tenant: Tenant) -> None:
        body = {"name": "Widget", "category": "hardware", "price": "12.50", "sku": "W-1"}
        await client.post("/api/v1/shop/products", json=body, headers=tenant.headers("admin"))
        response = await client.post("/api/v1/shop/products", json=body, headers=tenant.headers("admin"))
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_user_cannot_add_products(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post(
            "/api/v1/shop/products",
            json={"name": "Widget", "category": "hardware", "price": "1"},
            headers=tenant.headers("user"),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_browse(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        await _seed_catalogue(db_session, tenant)
        await create_product(db_session, tenant.organisation, name="Cable", sku="CAB-1", category="electrical")
        await db_session.commit()

        products = await client.get("/api/v1/shop/products?category=hardware", headers=tenant.headers("user"))
        assert {p["sku"] for p in products.json()["products"]} == {"DRILL-1", "SAW-1"}

        categories = await client.get("/api/v1/shop/categories", headers=tenant.headers("user"))
        assert categories.json()["categories"] == ["electrical", "hardware"]

        specials = await client.get("/api/v1/shop/specials", headers=tenant.headers("user"))
        assert [p["sku"] for p in specials.json()["products"]] == ["SAW-1"]


class TestQuotations:
    @pytest.mark.asyncio
    async def test_totals_use_catalogue_prices(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        buyer_id, drill_id, saw_id = await _seed_catalogue(db_session, tenant)
        quotation = await _quote(client, tenant, buyer_id, [
            {"product_id": drill_id, "quantity": 2},
            {"product_id": saw_id, "quantity": 3},
        ])
        assert quotation["status"] == "draft"
        assert quotation["total_items"] == 5
        assert quotation["total_amount"] == "380.00"
        assert quotation["currency"] == "ZAR"
        assert quotation["quotation_number"].startswith("QUO-")
        unit_prices = {item["product_id"]: item["unit_price"] for item in quotation["items"]}
        assert unit_prices == {drill_id: "100.00", saw_id: "60.00"}

    @pytest.mark.asyncio
    async def test_empty_items(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        buyer_id, _, _ = await _seed_catalogue(db_session, tenant)
        response = await client.post(
            "/api/v1/shop/quotation", json={"client_id": buyer_id, "items": []}, headers=tenant.headers("user")
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_product(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        buyer_id, _, _ = await _seed_catalogue(db_session, tenant)
        response = await client.post(
            "/api/v1/shop/quotation",
            json={"client_id": buyer_id, "items": [{"product_id": 9999, "quantity": 1}]},
            headers=tenant.headers("user"),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Products not found for items: 9999"

    @pytest.mark.asyncio
    async def test_other_tenant_product(
        self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant, other_tenant: Tenant
    ) -> None:
        buyer_id, _, _ = await _seed_catalogue(db_session, tenant)
        foreign = await create_product(db_session, other_tenant.organisation, sku="GLOBEX-1")
        await db_session.commit()
        response = await client.post(
            "/api/v1/shop/quotation",
            json={"client_id": buyer_id, "items": [{"product_id": foreign.id, "quantity": 1}]},
            headers=tenant.headers("user"),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_transition(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        buyer_id, drill_id, _ = await _seed_catalogue(db_session, tenant)
        quotation = await _quote(client, tenant, buyer_id, [{"product_id": drill_id, "quantity": 1}])
        response = await client.patch(
            f"/api/v1/shop/quotation/{quotation['id']}/status",
            json={"status": "delivered"},
            headers=tenant.headers("admin"),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status transition from draft to delivered"

    @pytest.mark.asyncio
    async def test_send_to_client_then_approve(
        self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant, fake_email: FakeEmailProvider
    ) -> None:
        buyer_id, drill_id, _ = await _seed_catalogue(db_session, tenant)
        quotation = await _quote(client, tenant, buyer_id, [{"product_id": drill_id, "quantity": 1}])

        sent = await client.post(
            f"/api/v1/shop/quotation/{quotation['id']}/send-to-client", headers=tenant.headers("admin")
        )
        assert sent.json()["message"] == "Quotation sent to client for review."
        assert sent.json()["quotation"]["status"] == "pending_client"
        mail = fake_email.sent[-1]
        assert mail["to"] == "buyer@buyerco.com"
        assert quotation["review_url"] in mail["text"]

        again = await client.post(
            f"/api/v1/shop/quotation/{quotation['id']}/send-to-client", headers=tenant.headers("admin")
        )
        assert again.status_code == 400

        approved = await client.patch(
            f"/api/v1/shop/quotation/{quotation['id']}/status",
            json={"status": "approved"},
            headers=tenant.headers("admin"),
        )
        assert approved.json()["message"] == "Quotation status updated to approved."

        stats = await client.get(
            f"/api/v1/rewards/user-stats/{tenant.users['user'].id}", headers=tenant.headers("user")
        )
        rewards = stats.json()["rewards"]
        assert rewards["total_xp"] == 50
        assert rewards["xp_breakdown"]["sales"] == 50
        assert rewards["transactions"][0]["action"] == "QUOTATION_APPROVED"

    @pytest.mark.asyncio
    async def test_listing(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        buyer_id, drill_id, _ = await _seed_catalogue(db_session, tenant)
        quotation = await _quote(client, tenant, buyer_id, [{"product_id": drill_id, "quantity": 1}])

        drafts = await client.get("/api/v1/shop/quotations?status=draft", headers=tenant.headers("admin"))
        assert [q["id"] for q in drafts.json()] == [quotation["id"]]

        mine = await client.get(
            f"/api/v1/shop/quotations/user/{tenant.users['user'].id}", headers=tenant.headers("user")
        )
        assert len(mine.json()) == 1

        detail = await client.get(f"/api/v1/shop/quotation/{quotation['id']}", headers=tenant.headers("user"))
        assert detail.json()["client"]["email"] == "buyer@buyerco.com"
