"""Asset API endpoints: /api/v1/assets/*."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loro.assets.schemas import AssetCreate, AssetListResponse, AssetResponse, AssetUpdate
from loro.assets.service import (
    assets_for_user,
    create_asset,
    delete_asset,
    get_asset,
    list_assets,
    notify_owner,
    restore_asset,
    search_assets,
    update_asset,
)
from loro.auth.context import STAFF_ROLES, WORKFORCE_ROLES, RequestContext
from loro.auth.dependencies import enterprise_only, require_organisation, require_roles
from loro.database import get_session
from loro.errors import ServiceError, raise_http

logger = structlog.get_logger()

router = APIRouter(
    prefix="/api/v1/assets",
    tags=["Assets"],
    dependencies=[Depends(enterprise_only("assets"))],
)


@router.post("", response_model=AssetResponse, status_code=201)
async def create(
    body: AssetCreate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    """Register an asset and email its owner."""
    org_id = require_organisation(ctx)
    try:
        asset = await create_asset(db, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = AssetResponse.model_validate(asset)
    await notify_owner(asset, "asset_assigned")
    logger.info("asset_created", asset_id=response.id, owner_id=response.owner_id)
    return response


@router.get("", response_model=AssetListResponse)
async def list_all(
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    assets = await list_assets(db, org_id, ctx.branch_id)
    return AssetListResponse(assets=[AssetResponse.model_validate(a) for a in assets], total=len(assets))


@router.get("/search/{query}", response_model=AssetListResponse)
async def search(
    query: str,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    """Search by brand, serial number, model, owner or branch name."""
    org_id = require_organisation(ctx)
    assets = await search_assets(db, query, org_id, ctx.branch_id)
    return AssetListResponse(assets=[AssetResponse.model_validate(a) for a in assets], total=len(assets))


@router.get("/for/{user_id}", response_model=AssetListResponse)
async def for_user(
    user_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        assets = await assets_for_user(db, user_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return AssetListResponse(assets=[AssetResponse.model_validate(a) for a in assets], total=len(assets))


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_one(
    asset_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        asset = await get_asset(db, asset_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return AssetResponse.model_validate(asset)


@router.patch("/restore/{asset_id}", response_model=AssetResponse)
async def restore(
    asset_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    """Undo a soft delete and let the owner know."""
    org_id = require_organisation(ctx)
    try:
        asset = await restore_asset(db, asset_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = AssetResponse.model_validate(asset)
    await notify_owner(asset, "asset_restored")
    return response


@router.patch("/{asset_id}", response_model=AssetResponse)
async def update(
    asset_id: int,
    body: AssetUpdate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        asset, reassigned = await update_asset(db, asset_id, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = AssetResponse.model_validate(asset)
    if reassigned:
        await notify_owner(asset, "asset_assigned")
    return response


@router.delete("/{asset_id}")
async def delete(
    asset_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    """Soft delete: the asset disappears from reads until restored."""
    org_id = require_organisation(ctx)
    try:
        await delete_asset(db, asset_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    logger.info("asset_deleted", asset_id=asset_id)
    return {"message": "Asset deleted"}
