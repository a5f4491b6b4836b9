"""Shared test fixtures.

Tests run against a throwaway SQLite database per test. Redis is never
initialized, so publishing, license caching and rate limiting are skipped.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("LORO_JWT_SECRET", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("LORO_LOG_FORMAT", "console")

from loro.auth.jwt import create_access_token, reset_keys  # noqa: E402
from loro.auth.password import hash_password  # noqa: E402
from loro.config import get_settings  # noqa: E402
from loro.database import close_db, get_engine, get_session, init_db  # noqa: E402
from loro.db import models  # noqa: E402, F401
from loro.db.base import Base  # noqa: E402
from loro.db.models import Branch, Client, License, Organisation, Product, User  # noqa: E402
from loro.email import service as email_module  # noqa: E402
from loro.email.service import BaseEmailProvider, EmailService  # noqa: E402
from loro.licensing.service import issue_license  # noqa: E402
from loro.main import create_app  # noqa: E402
from loro.storage.service import StorageError, get_storage_service  # noqa: E402

TEST_PASSWORD = "SecureP@ss1"


class FakeEmailProvider(BaseEmailProvider):
    """Records outgoing mail instead of delivering it."""

    name = "fake"

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []

    async def deliver(self, to_email: str, subject: str, html_body: str, text_body: str) -> None:
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "text": text_body})


class FakeStorage:
    """Signs keys it knows about and raises StorageError for the rest."""

    def __init__(self, known: set[str] | None = None) -> None:
        self.known = known if known is not None else set()

    async def get_signed_url(self, key: str, expires_in: int | None = None) -> str:
        if key not in self.known:
            raise StorageError(f"No such key: {key}")
        return f"https://storage.test/{key}?sig=abc"


@dataclass
class Tenant:
    """A seeded organisation with its license and a few users."""

    organisation: Organisation
    license: License
    branch: Branch | None = None
    users: dict[str, User] = field(default_factory=dict)

    def headers(self, key: str) -> dict[str, str]:
        user = self.users[key]
        token = create_access_token(
            user.id,
            user.role,
            self.organisation.id,
            user.branch_id,
            license_id=self.license.id,
            license_plan=self.license.plan,
        )
        return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    get_settings.cache_clear()
    reset_keys()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Initialize a fresh SQLite database with every table created."""
    tmpdir = tempfile.mkdtemp(prefix="loro_test_")
    await init_db(f"sqlite+aiosqlite:///{os.path.join(tmpdir, 'test.db')}")
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for seeding and assertions."""
    async for session in get_session():
        yield session
        break


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest_asyncio.fixture
async def client(database: None, fake_storage: FakeStorage) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to a freshly built app."""
    app = create_app()
    app.dependency_overrides[get_storage_service] = lambda: fake_storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fake_email(monkeypatch: pytest.MonkeyPatch) -> FakeEmailProvider:
    """Route all notification email to an in-memory provider."""
    provider = FakeEmailProvider()
    monkeypatch.setattr(email_module, "_email_service", EmailService(provider=provider))
    return provider


async def create_tenant(
    db: AsyncSession,
    plan: str = "enterprise",
    *,
    name: str = "Acme",
    with_branch: bool = False,
    roles: tuple[str, ...] = ("admin", "user"),
) -> Tenant:
    """Seed an organisation, its license, and one user per role key."""
    org = Organisation(name=name, email=f"info@{name.lower()}.com", currency="ZAR")
    db.add(org)
    await db.flush()

    branch = None
    if with_branch:
        branch = Branch(organisation_id=org.id, name=f"{name} HQ")
        db.add(branch)
        await db.flush()

    lic = await issue_license(db, org.id, plan)
    tenant = Tenant(organisation=org, license=lic, branch=branch)
    for role in roles:
        tenant.users[role] = await create_user(db, org, role, branch_id=branch.id if branch else None)
    await db.commit()
    return tenant


async def create_user(
    db: AsyncSession,
    org: Organisation,
    role: str = "user",
    *,
    email: str | None = None,
    name: str | None = None,
    branch_id: int | None = None,
) -> User:
    user = User(
        organisation_id=org.id,
        branch_id=branch_id,
        email=email or f"{role}@{org.name.lower()}.com",
        password_hash=hash_password(TEST_PASSWORD),
        name=name or role.title(),
        surname="Tester",
        role=role,
    )
    db.add(user)
    await db.flush()
    return user


async def create_client(db: AsyncSession, org: Organisation, email: str = "buyer@buyerco.com") -> Client:
    client = Client(name="Buyer Co", email=email, organisation_id=org.id)
    db.add(client)
    await db.flush()
    return client


async def create_product(
    db: AsyncSession,
    org: Organisation,
    *,
    name: str = "Widget",
    sku: str,
    price: str = "100.00",
    sale_price: str | None = None,
    category: str = "hardware",
    status: str = "active",
) -> Product:
    product = Product(
        name=name,
        sku=sku,
        category=category,
        price=Decimal(price),
        sale_price=Decimal(sale_price) if sale_price else None,
        is_on_promotion=sale_price is not None,
        status=status,
        organisation_id=org.id,
    )
    db.add(product)
    await db.flush()
    return product


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession) -> Tenant:
    """Enterprise organisation with an owner, an admin, a manager and a regular user."""
    return await create_tenant(db_session, roles=("owner", "admin", "manager", "user"))


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    """A second enterprise organisation for isolation checks."""
    return await create_tenant(db_session, name="Globex", roles=("admin", "user"))
