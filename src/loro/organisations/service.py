"""Organisation and branch management."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from loro.db.models import Branch, Organisation
from loro.errors import NotFoundError
from loro.organisations.schemas import BranchCreate, OrganisationCreate


async def create_organisation(db: AsyncSession, body: OrganisationCreate) -> Organisation:
    org = Organisation(name=body.name, email=body.email, currency=body.currency, branches=[])
    db.add(org)
    await db.flush()
    return org


async def get_organisation(db: AsyncSession, organisation_id: int) -> Organisation:
    org = await db.get(Organisation, organisation_id)
    if org is None or org.is_deleted:
        msg = "Organisation not found"
        raise NotFoundError(msg)
    return org


async def create_branch(db: AsyncSession, organisation_id: int, body: BranchCreate) -> Branch:
    org = await get_organisation(db, organisation_id)
    branch = Branch(organisation_id=org.id, name=body.name)
    db.add(branch)
    await db.flush()
    return branch
