"""Reseller API endpoints: /api/v1/resellers/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import STAFF_ROLES, WORKFORCE_ROLES, RequestContext
from loro.auth.dependencies import enterprise_only, require_organisation, require_roles
from loro.database import get_session
from loro.errors import ServiceError, raise_http
from loro.resellers.schemas import ResellerCreate, ResellerResponse, ResellerUpdate
from loro.resellers.service import (
    create_reseller,
    delete_reseller,
    get_reseller,
    list_resellers,
    restore_reseller,
    update_reseller,
)

router = APIRouter(
    prefix="/api/v1/resellers",
    tags=["Resellers"],
    dependencies=[Depends(enterprise_only("resellers"))],
)


@router.post("", response_model=ResellerResponse, status_code=201)
async def create(
    body: ResellerCreate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    reseller = await create_reseller(db, body, org_id, ctx.branch_id)
    await db.commit()
    return ResellerResponse.model_validate(reseller)


@router.get("", response_model=list[ResellerResponse])
async def list_all(
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    return [ResellerResponse.model_validate(r) for r in await list_resellers(db, org_id, ctx.branch_id)]


@router.get("/{reseller_id}", response_model=ResellerResponse)
async def get_one(
    reseller_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        reseller = await get_reseller(db, reseller_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return ResellerResponse.model_validate(reseller)


@router.patch("/restore/{reseller_id}", response_model=ResellerResponse)
async def restore(
    reseller_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        reseller = await restore_reseller(db, reseller_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return ResellerResponse.model_validate(reseller)


@router.patch("/{reseller_id}", response_model=ResellerResponse)
async def update(
    reseller_id: int,
    body: ResellerUpdate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        reseller = await update_reseller(db, reseller_id, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return ResellerResponse.model_validate(reseller)


@router.delete("/{reseller_id}")
async def delete(
    reseller_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        await delete_reseller(db, reseller_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return {"message": "Reseller deleted"}
