"""Integration tests for sales tips and the daily broadcast."""

from __future__ import annotations

import json

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from loro.sales_tips.catalogue import SALES_TIPS
from loro.sales_tips.service import broadcast_tip_of_the_day
from loro.sales_tips.worker import SalesTipWorkerSettings, broadcast_sales_tip
from tests.conftest import Tenant, create_tenant


class _RecordingRedis:
    def __init__(self) -> None:
        self.published: list[tuple[str, str]] = []

    async def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        return 1


class TestCatalogue:
    @pytest.mark.asyncio
    async def test_tip_of_the_day_is_stable(self, client: AsyncClient, tenant: Tenant) -> None:
        first = await client.get("/api/v1/sales-tips/tip-of-the-day", headers=tenant.headers("user"))
        second = await client.get("/api/v1/sales-tips/tip-of-the-day", headers=tenant.headers("manager"))
        assert first.status_code == 200
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_all_tips(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.get("/api/v1/sales-tips", headers=tenant.headers("user"))
        assert len(response.json()) == len(SALES_TIPS)

    @pytest.mark.asyncio
    async def test_by_category(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.get("/api/v1/sales-tips/category/mindset_preparation", headers=tenant.headers("user"))
        tips = response.json()
        assert tips
        assert {t["category"] for t in tips} == {"mindset_preparation"}

    @pytest.mark.asyncio
    async def test_unknown_category(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.get("/api/v1/sales-tips/category/cold_calling", headers=tenant.headers("user"))
        assert response.status_code == 404
        assert response.json()["detail"] == "Unknown category: cold_calling"

    @pytest.mark.asyncio
    async def test_single_tip(self, client: AsyncClient, tenant: Tenant) -> None:
        found = await client.get(f"/api/v1/sales-tips/{SALES_TIPS[0].id}", headers=tenant.headers("user"))
        assert found.json()["title"] == SALES_TIPS[0].title
        missing = await client.get("/api/v1/sales-tips/99999", headers=tenant.headers("user"))
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_available_on_every_plan(self, client: AsyncClient, db_session: AsyncSession) -> None:
        starter = await create_tenant(db_session, "starter", name="Tiny")
        response = await client.get("/api/v1/sales-tips/tip-of-the-day", headers=starter.headers("user"))
        assert response.status_code == 200


class TestBroadcast:
    @pytest.mark.asyncio
    async def test_trigger_notifies_active_users(
        self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant, other_tenant: Tenant
    ) -> None:
        tenant.users["manager"].is_active = False
        await db_session.commit()

        response = await client.post("/api/v1/sales-tips/trigger-broadcast", headers=tenant.headers("admin"))
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Sales tip broadcast completed"
        assert body["total_users"] == 5
        assert body["notifications_sent"] == 5

        inbox = await client.get("/api/v1/notifications", headers=other_tenant.headers("user"))
        notification = inbox.json()["notifications"][0]
        assert notification["type"] == "sales_tip"
        assert notification["title"].startswith("Sales tip: ")
        assert notification["data"]["tip_id"] == body["tip_id"]

    @pytest.mark.asyncio
    async def test_trigger_requires_admin(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post("/api/v1/sales-tips/trigger-broadcast", headers=tenant.headers("manager"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_small_batches(self, db_session: AsyncSession, tenant: Tenant) -> None:
        result = await broadcast_tip_of_the_day(db_session, batch_size=1, batch_delay=0)
        assert result["total_users"] == 4
        assert result["notifications_sent"] == 4

    @pytest.mark.asyncio
    async def test_pushes_follow_commit(self, db_session: AsyncSession, tenant: Tenant) -> None:
        redis = _RecordingRedis()
        result = await broadcast_tip_of_the_day(db_session, redis, batch_size=2, batch_delay=0)
        assert result["notifications_sent"] == 4
        assert sorted(channel for channel, _ in redis.published) == sorted(
            f"ws:user:{user.id}" for user in tenant.users.values()
        )
        payload = json.loads(redis.published[0][1])
        assert payload["data"]["type"] == "sales_tip"

    @pytest.mark.asyncio
    async def test_failed_batch_pushes_nothing(
        self, db_session: AsyncSession, tenant: Tenant, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def failing_commit() -> None:
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        redis = _RecordingRedis()
        result = await broadcast_tip_of_the_day(db_session, redis, batch_size=2, batch_delay=0)
        assert result["total_users"] == 4
        assert result["notifications_sent"] == 0
        assert redis.published == []


class TestWorker:
    @pytest.mark.asyncio
    async def test_scheduled_job_runs_broadcast(self, tenant: Tenant) -> None:
        result = await broadcast_sales_tip({})
        assert result is not None
        assert result["notifications_sent"] == 4

    def test_weekday_morning_schedule(self) -> None:
        job = SalesTipWorkerSettings.cron_jobs[0]
        assert job.weekday == {0, 1, 2, 3, 4}
        assert job.hour == 8
        assert job.minute == 0
