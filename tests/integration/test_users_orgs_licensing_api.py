"""Integration tests for user, organisation and license management."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import Tenant, create_tenant

NEW_USER = {"email": "Tech@Acme.com", "password": "Str0ngPassword", "name": "Tina", "role": "technician"}


class TestUsers:
    @pytest.mark.asyncio
    async def test_create_user(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post("/api/v1/users", json=NEW_USER, headers=tenant.headers("admin"))
        assert response.status_code == 201
        profile = response.json()
        assert profile["email"] == "tech@acme.com"
        assert profile["role"] == "technician"
        assert profile["organisation_id"] == tenant.organisation.id

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post(
            "/api/v1/users", json={**NEW_USER, "email": "user@acme.com"}, headers=tenant.headers("admin")
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_weak_password(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post(
            "/api/v1/users", json={**NEW_USER, "password": "letters-only"}, headers=tenant.headers("admin")
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Password must contain at least one digit"

    @pytest.mark.asyncio
    async def test_only_owner_creates_owner(self, client: AsyncClient, tenant: Tenant) -> None:
        body = {**NEW_USER, "role": "owner"}
        denied = await client.post("/api/v1/users", json=body, headers=tenant.headers("admin"))
        assert denied.status_code == 403
        allowed = await client.post("/api/v1/users", json=body, headers=tenant.headers("owner"))
        assert allowed.status_code == 201

    @pytest.mark.asyncio
    async def test_foreign_branch(self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant) -> None:
        globex = await create_tenant(db_session, name="Globex", with_branch=True)
        response = await client.post(
            "/api/v1/users", json={**NEW_USER, "branch_id": globex.branch.id}, headers=tenant.headers("admin")
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_regular_user_cannot_list(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.get("/api/v1/users", headers=tenant.headers("user"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_list_and_get(self, client: AsyncClient, tenant: Tenant, other_tenant: Tenant) -> None:
        listing = await client.get("/api/v1/users", headers=tenant.headers("manager"))
        assert {u["email"] for u in listing.json()} == {
            "owner@acme.com", "admin@acme.com", "manager@acme.com", "user@acme.com",
        }
        foreign = await client.get(f"/api/v1/users/{other_tenant.users['user'].id}", headers=tenant.headers("admin"))
        assert foreign.status_code == 404


class TestOrganisations:
    @pytest.mark.asyncio
    async def test_developer_creates_organisation(self, client: AsyncClient, db_session: AsyncSession) -> None:
        platform = await create_tenant(db_session, name="Platform", roles=("developer",))
        response = await client.post(
            "/api/v1/organisations", json={"name": "Initech", "currency": "USD"}, headers=platform.headers("developer")
        )
        assert response.status_code == 201
        assert response.json()["currency"] == "USD"
        assert response.json()["branches"] == []

    @pytest.mark.asyncio
    async def test_owner_cannot_create_organisation(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post("/api/v1/organisations", json={"name": "Initech"}, headers=tenant.headers("owner"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_add_branch(self, client: AsyncClient, tenant: Tenant) -> None:
        org_id = tenant.organisation.id
        response = await client.post(
            f"/api/v1/organisations/{org_id}/branches", json={"name": "Durban"}, headers=tenant.headers("admin")
        )
        assert response.status_code == 201
        org = await client.get(f"/api/v1/organisations/{org_id}", headers=tenant.headers("admin"))
        assert [b["name"] for b in org.json()["branches"]] == ["Durban"]

    @pytest.mark.asyncio
    async def test_other_organisation_forbidden(self, client: AsyncClient, tenant: Tenant, other_tenant: Tenant) -> None:
        response = await client.get(
            f"/api/v1/organisations/{other_tenant.organisation.id}", headers=tenant.headers("admin")
        )
        assert response.status_code == 403


class TestLicensing:
    @pytest.mark.asyncio
    async def test_owner_issues_for_own_org(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post(
            "/api/v1/licensing",
            json={"organisation_id": tenant.organisation.id, "plan": "business", "max_users": 25},
            headers=tenant.headers("owner"),
        )
        assert response.status_code == 201
        lic = response.json()
        assert lic["plan"] == "business"
        assert lic["max_users"] == 25

        check = await client.get(f"/api/v1/licensing/{lic['id']}/validate", headers=tenant.headers("owner"))
        assert check.json() == {"license_id": lic["id"], "valid": True}

    @pytest.mark.asyncio
    async def test_owner_cannot_license_other_org(
        self, client: AsyncClient, tenant: Tenant, other_tenant: Tenant
    ) -> None:
        response = await client.post(
            "/api/v1/licensing",
            json={"organisation_id": other_tenant.organisation.id, "plan": "enterprise"},
            headers=tenant.headers("owner"),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_plan(self, client: AsyncClient, tenant: Tenant) -> None:
        response = await client.post(
            "/api/v1/licensing",
            json={"organisation_id": tenant.organisation.id, "plan": "platinum"},
            headers=tenant.headers("owner"),
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_suspended_license_invalid(
        self, client: AsyncClient, db_session: AsyncSession, tenant: Tenant
    ) -> None:
        issued = await client.post(
            "/api/v1/licensing",
            json={"organisation_id": tenant.organisation.id, "plan": "starter", "status": "suspended"},
            headers=tenant.headers("owner"),
        )
        check = await client.get(f"/api/v1/licensing/{issued.json()['id']}/validate", headers=tenant.headers("owner"))
        assert check.json()["valid"] is False

    @pytest.mark.asyncio
    async def test_other_orgs_license_hidden(self, client: AsyncClient, tenant: Tenant, other_tenant: Tenant) -> None:
        response = await client.get(f"/api/v1/licensing/{other_tenant.license.id}", headers=tenant.headers("admin"))
        assert response.status_code == 404
