"""Integration tests for sign-in, refresh and token guards."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.jwt import create_refresh_token
from tests.conftest import TEST_PASSWORD, Tenant


async def _sign_in(client: AsyncClient, email: str, password: str = TEST_PASSWORD):
    return await client.post("/api/v1/auth/sign-in", json={"email": email, "password": password})


class TestSignIn:
    @pytest.mark.asyncio
    async def test_success(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await _sign_in(client, "User@Acme.com")
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["license_plan"] == "enterprise"
        assert body["refresh_token"]
        assert body["user"]["id"] == tenant.users["user"].id
        assert "password_hash" not in body["user"]

    @pytest.mark.asyncio
    async def test_token_works(self, client: AsyncClient, tenant: Tenant) -> None:
        token = (await _sign_in(client, "user@acme.com")).json()["access_token"]
        me = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "user@acme.com"

    @pytest.mark.asyncio
    async def test_legacy_token_header(self, client: AsyncClient, tenant: Tenant) -> None:
        token = (await _sign_in(client, "user@acme.com")).json()["access_token"]
        me = await client.get("/api/v1/users/me", headers={"token": token})
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await _sign_in(client, "user@acme.com", "nope")
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_unknown_email(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await _sign_in(client, "ghost@acme.com")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_inactive_account(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        tenant.users["user"].is_active = False
        await db_session.commit()
        response = await _sign_in(client, "user@acme.com")
        assert response.status_code == 403
        assert response.json()["detail"] == "Account is inactive"

    @pytest.mark.asyncio
    async def test_daily_login_xp_once_per_day(self, client: AsyncClient, tenant: Tenant) -> None:
        await _sign_in(client, "user@acme.com")
        await _sign_in(client, "user@acme.com")
        stats = await client.get(
            f"/api/v1/rewards/user-stats/{tenant.users['user'].id}", headers=tenant.headers("admin")
        )
        rewards = stats.json()["rewards"]
        assert rewards["total_xp"] == 10
        assert rewards["xp_breakdown"]["login"] == 10


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh(self, client: AsyncClient, tenant: Tenant) -> None:
        refresh_token = (await _sign_in(client, "user@acme.com")).json()["refresh_token"]
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 200
        assert response.json()["access_token"]

    @pytest.mark.asyncio
    async def test_access_token_rejected(self, client: AsyncClient, tenant: Tenant) -> None:
        access_token = (await _sign_in(client, "user@acme.com")).json()["access_token"]
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_deleted_user(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        token = create_refresh_token(tenant.users["user"].id, token_id="t-1")
        tenant.users["user"].is_deleted = True
        await db_session.commit()
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": token})
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"


class TestGuards:
    @pytest.mark.asyncio
    async def test_no_token(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.get("/api/v1/users/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "No token provided"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_suspended_license(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        tenant.license.status = "suspended"
        await db_session.commit()
        response = await client.get("/api/v1/users/me", headers=tenant.headers("user"))
        assert response.status_code == 401
        assert response.json()["detail"] == "Your organization's license has expired"
