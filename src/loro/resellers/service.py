"""Resellers supplying the organisation's product catalogue."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.db.base import tenant_clause
from loro.db.models import Reseller
from loro.errors import NotFoundError
from loro.resellers.schemas import ResellerCreate, ResellerUpdate

logger = logging.getLogger(__name__)


async def _get_scoped(
    db: AsyncSession,
    reseller_id: int,
    organisation_id: int | None,
    branch_id: int | None,
    *,
    include_deleted: bool = False,
) -> Reseller:
    stmt = select(Reseller).where(Reseller.id == reseller_id, *tenant_clause(Reseller, organisation_id, branch_id))
    if not include_deleted:
        stmt = stmt.where(Reseller.is_deleted.is_(False))
    reseller = (await db.execute(stmt)).scalar_one_or_none()
    if reseller is None:
        msg = "Reseller not found"
        raise NotFoundError(msg)
    return reseller


async def create_reseller(
    db: AsyncSession,
    body: ResellerCreate,
    organisation_id: int,
    branch_id: int | None = None,
) -> Reseller:
    reseller = Reseller(**body.model_dump(), organisation_id=organisation_id, branch_id=branch_id)
    db.add(reseller)
    await db.flush()
    await db.refresh(reseller)
    return reseller


async def list_resellers(db: AsyncSession, organisation_id: int | None, branch_id: int | None = None) -> list[Reseller]:
    result = await db.execute(
        select(Reseller)
        .where(Reseller.is_deleted.is_(False), *tenant_clause(Reseller, organisation_id, branch_id))
        .order_by(Reseller.name)
    )
    return list(result.scalars().all())


async def get_reseller(db: AsyncSession, reseller_id: int, organisation_id: int | None, branch_id: int | None = None) -> Reseller:
    return await _get_scoped(db, reseller_id, organisation_id, branch_id)


async def update_reseller(
    db: AsyncSession,
    reseller_id: int,
    body: ResellerUpdate,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> Reseller:
    reseller = await _get_scoped(db, reseller_id, organisation_id, branch_id)
    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(reseller, key, value)
    await db.flush()
    await db.refresh(reseller)
    return reseller


async def delete_reseller(db: AsyncSession, reseller_id: int, organisation_id: int | None, branch_id: int | None = None) -> None:
    reseller = await _get_scoped(db, reseller_id, organisation_id, branch_id)
    reseller.is_deleted = True
    await db.flush()
    logger.info("Reseller %s soft-deleted", reseller_id)


async def restore_reseller(db: AsyncSession, reseller_id: int, organisation_id: int | None, branch_id: int | None = None) -> Reseller:
    reseller = await _get_scoped(db, reseller_id, organisation_id, branch_id, include_deleted=True)
    reseller.is_deleted = False
    await db.flush()
    await db.refresh(reseller)
    return reseller
