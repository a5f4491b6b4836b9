"""Payslip records and document access.

Documents live in object storage under ``document_key``. Older records may
only carry a direct ``document_url``.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.db.base import tenant_clause
from loro.db.models import Payslip
from loro.errors import ForbiddenError, NotFoundError
from loro.payslips.schemas import PayslipCreate, PayslipUpdate
from loro.storage.service import StorageError, StorageService
from loro.users.service import get_org_user

logger = logging.getLogger(__name__)


def _ensure_can_read(ctx: RequestContext, user_id: int) -> None:
    if ctx.user_id != user_id and not ctx.is_elevated:
        msg = "You can only view your own payslips"
        raise ForbiddenError(msg)


async def _get_scoped(db: AsyncSession, payslip_id: int, organisation_id: int | None) -> Payslip:
    result = await db.execute(
        select(Payslip).where(
            Payslip.id == payslip_id,
            Payslip.is_deleted.is_(False),
            *tenant_clause(Payslip, organisation_id),
        )
    )
    payslip = result.scalar_one_or_none()
    if payslip is None:
        msg = "Payslip not found"
        raise NotFoundError(msg)
    return payslip


async def create_payslip(
    db: AsyncSession,
    body: PayslipCreate,
    organisation_id: int,
    branch_id: int | None = None,
) -> Payslip:
    employee = await get_org_user(db, body.user_id, organisation_id)
    payslip = Payslip(
        **body.model_dump(),
        organisation_id=organisation_id,
        branch_id=branch_id if branch_id is not None else employee.branch_id,
    )
    db.add(payslip)
    await db.flush()
    await db.refresh(payslip)
    logger.info("Payslip %s issued to user %s for %s", payslip.id, payslip.user_id, payslip.period)
    return payslip


async def list_payslips(
    db: AsyncSession,
    ctx: RequestContext,
    *,
    user_id: int | None = None,
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Payslip], int]:
    """Paginated payslips. Non-elevated callers only ever see their own."""
    if not ctx.is_elevated:
        user_id = ctx.user_id

    conditions = [Payslip.is_deleted.is_(False), *tenant_clause(Payslip, ctx.organisation_id, ctx.branch_id)]
    if user_id is not None:
        conditions.append(Payslip.user_id == user_id)
    if status:
        conditions.append(Payslip.status == status)
    if start_date:
        conditions.append(Payslip.issue_date >= start_date)
    if end_date:
        conditions.append(Payslip.issue_date <= end_date)

    total = (await db.execute(select(func.count()).select_from(Payslip).where(*conditions))).scalar_one()
    result = await db.execute(
        select(Payslip)
        .where(*conditions)
        .order_by(Payslip.issue_date.desc(), Payslip.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def payslips_for_user(db: AsyncSession, ctx: RequestContext, user_id: int) -> list[Payslip]:
    _ensure_can_read(ctx, user_id)
    await get_org_user(db, user_id, ctx.organisation_id)
    result = await db.execute(
        select(Payslip)
        .where(
            Payslip.user_id == user_id,
            Payslip.is_deleted.is_(False),
            *tenant_clause(Payslip, ctx.organisation_id),
        )
        .order_by(Payslip.issue_date.desc(), Payslip.id.desc())
    )
    return list(result.scalars().all())


async def get_payslip(db: AsyncSession, ctx: RequestContext, payslip_id: int) -> Payslip:
    payslip = await _get_scoped(db, payslip_id, ctx.organisation_id)
    _ensure_can_read(ctx, payslip.user_id)
    return payslip


async def update_payslip(
    db: AsyncSession,
    payslip_id: int,
    body: PayslipUpdate,
    organisation_id: int | None,
) -> Payslip:
    payslip = await _get_scoped(db, payslip_id, organisation_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        if value is None and key in ("period", "issue_date", "status"):
            continue
        setattr(payslip, key, value)
    await db.flush()
    await db.refresh(payslip)
    return payslip


async def delete_payslip(db: AsyncSession, payslip_id: int, organisation_id: int | None) -> None:
    payslip = await _get_scoped(db, payslip_id, organisation_id)
    payslip.is_deleted = True
    await db.flush()


async def get_document_url(
    db: AsyncSession,
    ctx: RequestContext,
    payslip_id: int,
    storage: StorageService,
) -> str:
    """
    Resolve a download URL for the payslip document.

    A stored object is signed on demand; a direct URL is the fallback.
    Opening your own payslip marks it viewed.

    Raises:
        NotFoundError: No document, or the stored object cannot be signed.
    """
    payslip = await get_payslip(db, ctx, payslip_id)

    if payslip.document_key:
        try:
            url = await storage.get_signed_url(payslip.document_key)
        except StorageError as e:
            logger.error("Failed to sign payslip %s document %s: %s", payslip.id, payslip.document_key, e)
            msg = "Payslip document not found"
            raise NotFoundError(msg) from e
    elif payslip.document_url:
        url = payslip.document_url
    else:
        msg = "Payslip document not available"
        raise NotFoundError(msg)

    if payslip.user_id == ctx.user_id and payslip.status != "viewed":
        payslip.status = "viewed"
        await db.flush()
    return url
