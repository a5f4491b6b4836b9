"""Integration tests for leave requests and the approval workflow."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from tests.conftest import FakeEmailProvider, Tenant

# Mon 2026-03-02 .. Wed 2026-03-04
WEEK_START = "2026-03-02"
WEEK_MID = "2026-03-04"


async def _file(client: AsyncClient, tenant: Tenant, start: str = WEEK_START, end: str = WEEK_MID, **extra) -> dict:
    body = {"leave_type": "annual", "start_date": start, "end_date": end, **extra}
    response = await client.post("/api/v1/leave", json=body, headers=tenant.headers("user"))
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateLeave:
    @pytest.mark.asyncio
    async def test_duration_from_business_days(self, client: AsyncClient, tenant: Tenant) -> None:
        data = await _file(client, tenant, "2026-03-06", "2026-03-10")
        assert data["message"] == "Leave request created successfully"
        assert data["leave"]["status"] == "pending"
        assert data["leave"]["duration"] == 3.0
        assert data["leave"]["owner"]["id"] == tenant.users["user"].id

    @pytest.mark.asyncio
    async def test_half_day(self, client: AsyncClient, tenant: Tenant) -> None:
        data = await _file(client, tenant, WEEK_MID, WEEK_MID, is_half_day=True, half_day_period="first_half")
        assert data["leave"]["duration"] == 0.5

    @pytest.mark.asyncio
    async def test_end_before_start(self, client: AsyncClient, tenant: Tenant) -> None:
        body = {"leave_type": "annual", "start_date": WEEK_MID, "end_date": WEEK_START}
        response = await client.post("/api/v1/leave", json=body, headers=tenant.headers("user"))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_overlap_with_approved_is_auto_rejected(
        self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider
    ) -> None:
        first = await _file(client, tenant)
        await client.patch(f"/api/v1/leave/{first['leave']['id']}/approve", headers=tenant.headers("manager"))

        second = await _file(client, tenant, WEEK_MID, "2026-03-05")
        assert second["message"] == "Leave request created but automatically rejected due to conflicting dates"
        assert second["leave"]["status"] == "rejected"
        assert f"#{first['leave']['id']}" in second["leave"]["rejection_reason"]
        assert fake_email.sent[-1]["subject"] == "Your annual leave has been rejected"

    @pytest.mark.asyncio
    async def test_overlap_with_pending_is_allowed(self, client: AsyncClient, tenant: Tenant) -> None:
        await _file(client, tenant)
        second = await _file(client, tenant)
        assert second["leave"]["status"] == "pending"


class TestWorkflow:
    @pytest.mark.asyncio
    async def test_approve(self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider) -> None:
        leave = (await _file(client, tenant))["leave"]
        response = await client.patch(
            f"/api/v1/leave/{leave['id']}/approve", json={"comments": "Enjoy"}, headers=tenant.headers("manager")
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["approved_by"]["id"] == tenant.users["manager"].id
        assert data["comments"] == "Enjoy"
        assert fake_email.sent[-1]["to"] == tenant.users["user"].email

    @pytest.mark.asyncio
    async def test_regular_user_cannot_approve(self, client: AsyncClient, tenant: Tenant) -> None:
        leave = (await _file(client, tenant))["leave"]
        response = await client.patch(f"/api/v1/leave/{leave['id']}/approve", headers=tenant.headers("user"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_reject_requires_reason(self, client: AsyncClient, tenant: Tenant) -> None:
        leave = (await _file(client, tenant))["leave"]
        response = await client.patch(
            f"/api/v1/leave/{leave['id']}/reject", json={"rejection_reason": "  "}, headers=tenant.headers("admin")
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Rejection reason is required"

    @pytest.mark.asyncio
    async def test_cannot_reject_approved(self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider) -> None:
        leave = (await _file(client, tenant))["leave"]
        await client.patch(f"/api/v1/leave/{leave['id']}/approve", headers=tenant.headers("admin"))
        response = await client.patch(
            f"/api/v1/leave/{leave['id']}/reject", json={"rejection_reason": "No"}, headers=tenant.headers("admin")
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Leave request cannot be rejected because it is already approved"

    @pytest.mark.asyncio
    async def test_owner_cancels(self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider) -> None:
        leave = (await _file(client, tenant))["leave"]
        response = await client.patch(
            f"/api/v1/leave/{leave['id']}/cancel",
            json={"cancellation_reason": "Plans changed"},
            headers=tenant.headers("user"),
        )
        assert response.json()["status"] == "cancelled_by_user"
        assert response.json()["cancellation_reason"] == "Plans changed"

    @pytest.mark.asyncio
    async def test_admin_cancels_approved(self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider) -> None:
        leave = (await _file(client, tenant))["leave"]
        await client.patch(f"/api/v1/leave/{leave['id']}/approve", headers=tenant.headers("admin"))
        response = await client.patch(
            f"/api/v1/leave/{leave['id']}/cancel",
            json={"cancellation_reason": "Business need"},
            headers=tenant.headers("admin"),
        )
        assert response.json()["status"] == "cancelled_by_admin"
        assert "cancelled by an administrator" in fake_email.sent[-1]["text"]

    @pytest.mark.asyncio
    async def test_cancel_requires_reason(self, client: AsyncClient, tenant: Tenant) -> None:
        leave = (await _file(client, tenant))["leave"]
        response = await client.patch(f"/api/v1/leave/{leave['id']}/cancel", json={}, headers=tenant.headers("user"))
        assert response.status_code == 400
        assert response.json()["detail"] == "Cancellation reason is required"

    @pytest.mark.asyncio
    async def test_update_only_while_pending(self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider) -> None:
        leave = (await _file(client, tenant))["leave"]
        updated = await client.patch(
            f"/api/v1/leave/{leave['id']}", json={"end_date": "2026-03-06"}, headers=tenant.headers("user")
        )
        assert updated.json()["duration"] == 5.0

        await client.patch(f"/api/v1/leave/{leave['id']}/approve", headers=tenant.headers("admin"))
        response = await client.patch(
            f"/api/v1/leave/{leave['id']}", json={"motivation": "x"}, headers=tenant.headers("user")
        )
        assert response.status_code == 400


class TestListing:
    @pytest.mark.asyncio
    async def test_filters_and_pagination(self, client: AsyncClient, tenant: Tenant, fake_email: FakeEmailProvider) -> None:
        for _ in range(3):
            await _file(client, tenant)
        sick = await _file(client, tenant, leave_type="sick")
        await client.patch(f"/api/v1/leave/{sick['leave']['id']}/approve", headers=tenant.headers("admin"))

        page = await client.get("/api/v1/leave?limit=2&page=1", headers=tenant.headers("admin"))
        body = page.json()
        assert len(body["data"]) == 2
        assert body["meta"] == {"total": 4, "page": 1, "limit": 2, "total_pages": 2}

        approved = await client.get("/api/v1/leave?is_approved=true", headers=tenant.headers("admin"))
        assert [lv["id"] for lv in approved.json()["data"]] == [sick["leave"]["id"]]

        by_type = await client.get("/api/v1/leave?leave_type=annual", headers=tenant.headers("admin"))
        assert by_type.json()["meta"]["total"] == 3

    @pytest.mark.asyncio
    async def test_for_user(self, client: AsyncClient, tenant: Tenant) -> None:
        await _file(client, tenant)
        response = await client.get(f"/api/v1/leave/user/{tenant.users['user'].id}", headers=tenant.headers("admin"))
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_soft_delete_and_restore(self, client: AsyncClient, tenant: Tenant) -> None:
        leave = (await _file(client, tenant))["leave"]
        deleted = await client.delete(f"/api/v1/leave/{leave['id']}", headers=tenant.headers("user"))
        assert deleted.json() == {"message": "Leave request deleted successfully"}
        assert (await client.get(f"/api/v1/leave/{leave['id']}", headers=tenant.headers("user"))).status_code == 404

        restored = await client.patch(f"/api/v1/leave/restore/{leave['id']}", headers=tenant.headers("admin"))
        assert restored.status_code == 200
        assert (await client.get(f"/api/v1/leave/{leave['id']}", headers=tenant.headers("user"))).status_code == 200

    @pytest.mark.asyncio
    async def test_other_tenant_cannot_see(self, client: AsyncClient, tenant: Tenant, other_tenant: Tenant) -> None:
        leave = (await _file(client, tenant))["leave"]
        response = await client.get(f"/api/v1/leave/{leave['id']}", headers=other_tenant.headers("admin"))
        assert response.status_code == 404
