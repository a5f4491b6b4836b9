"""Licensing endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.dependencies import require_roles
from loro.database import get_session
from loro.dependencies import get_redis_dep
from loro.errors import ServiceError, raise_http
from loro.licensing.schemas import LicenseCreate, LicenseResponse, LicenseValidationResponse
from loro.licensing.service import get_license, issue_license, validate_license

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/licensing", tags=["Licensing"])


@router.post("", response_model=LicenseResponse, status_code=201)
async def create(
    body: LicenseCreate,
    ctx: RequestContext = Depends(require_roles("developer", "owner")),
    db: AsyncSession = Depends(get_session),
):
    """Issue a license. Owners may only license their own organisation."""
    if ctx.role.lower() == "owner" and ctx.organisation_id != body.organisation_id:
        raise HTTPException(status_code=403, detail="You do not have permission to access this resource")
    try:
        lic = await issue_license(
            db,
            body.organisation_id,
            body.plan,
            status=body.status,
            valid_days=body.valid_days,
            max_users=body.max_users,
        )
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    logger.info("license_issued", license_id=lic.id, organisation_id=lic.organisation_id, plan=lic.plan)
    return LicenseResponse.model_validate(lic)


@router.get("/{license_id}/validate", response_model=LicenseValidationResponse)
async def validate(
    license_id: str,
    _ctx: RequestContext = Depends(require_roles("developer", "owner", "admin")),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    return LicenseValidationResponse(
        license_id=license_id,
        valid=await validate_license(db, redis, license_id),
    )


@router.get("/{license_id}", response_model=LicenseResponse)
async def get_one(
    license_id: str,
    ctx: RequestContext = Depends(require_roles("developer", "owner", "admin")),
    db: AsyncSession = Depends(get_session),
):
    try:
        lic = await get_license(db, license_id)
    except ServiceError as e:
        raise_http(e)
    if ctx.role.lower() != "developer" and lic.organisation_id != ctx.organisation_id:
        raise HTTPException(status_code=404, detail=f"License {license_id} not found")
    return LicenseResponse.model_validate(lic)
