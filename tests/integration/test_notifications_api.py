"""Integration tests for the notification inbox."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from loro.notifications.service import create_notification
from tests.conftest import Tenant


async def _notify(db: AsyncSession, user_id: int, title: str) -> int:
    notification = await create_notification(db, user_id, "system", title, "Body")
    await db.commit()
    return notification.id


class TestInbox:
    @pytest.mark.asyncio
    async def test_lists_own_newest_first(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        await _notify(db_session, tenant.users["user"].id, "First")
        await _notify(db_session, tenant.users["user"].id, "Second")
        await _notify(db_session, tenant.users["admin"].id, "Not yours")

        response = await client.get("/api/v1/notifications", headers=tenant.headers("user"))
        body = response.json()
        assert body["total"] == 2
        assert [n["title"] for n in body["notifications"]] == ["Second", "First"]
        assert body["notifications"][0]["read"] is False

    @pytest.mark.asyncio
    async def test_pagination(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        for i in range(3):
            await _notify(db_session, tenant.users["user"].id, f"N{i}")
        response = await client.get("/api/v1/notifications?page=2&per_page=2", headers=tenant.headers("user"))
        body = response.json()
        assert body["total"] == 3
        assert len(body["notifications"]) == 1

    @pytest.mark.asyncio
    async def test_mark_read(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        notification_id = await _notify(db_session, tenant.users["user"].id, "Hello")
        response = await client.patch(f"/api/v1/notifications/{notification_id}/read", headers=tenant.headers("user"))
        assert response.json() == {"detail": "Notification marked as read"}
        inbox = await client.get("/api/v1/notifications", headers=tenant.headers("user"))
        assert inbox.json()["notifications"][0]["read"] is True

    @pytest.mark.asyncio
    async def test_cannot_mark_someone_elses(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        notification_id = await _notify(db_session, tenant.users["admin"].id, "Private")
        response = await client.patch(f"/api/v1/notifications/{notification_id}/read", headers=tenant.headers("user"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_type(self, db_session: AsyncSession, tenant: Tenant) -> None:
        with pytest.raises(ValueError, match="Invalid notification type"):
            await create_notification(db_session, tenant.users["user"].id, "spam", "x", "y")
