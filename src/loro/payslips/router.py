"""Payslip API endpoints: /api/v1/payslips/*."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import STAFF_ROLES, WORKFORCE_ROLES, RequestContext
from loro.auth.dependencies import enterprise_only, require_organisation, require_roles
from loro.database import get_session
from loro.errors import ServiceError, raise_http
from loro.pagination import page_meta
from loro.payslips.schemas import (
    PayslipCreate,
    PayslipDocumentResponse,
    PayslipListResponse,
    PayslipResponse,
    PayslipStatus,
    PayslipUpdate,
    payslip_response,
)
from loro.payslips.service import (
    create_payslip,
    delete_payslip,
    get_document_url,
    get_payslip,
    list_payslips,
    payslips_for_user,
    update_payslip,
)
from loro.storage.service import StorageService, get_storage_service

router = APIRouter(
    prefix="/api/v1/payslips",
    tags=["Payslips"],
    dependencies=[Depends(enterprise_only("payslips"))],
)


@router.post("", response_model=PayslipResponse, status_code=201)
async def create(
    body: PayslipCreate,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        payslip = await create_payslip(db, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return payslip_response(payslip)


@router.get("", response_model=PayslipListResponse)
async def list_all(
    user_id: int | None = Query(None),
    status: PayslipStatus | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    require_organisation(ctx)
    payslips, total = await list_payslips(
        db,
        ctx,
        user_id=user_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return PayslipListResponse(
        data=[payslip_response(p) for p in payslips],
        meta=page_meta(total, page, limit),
    )


@router.get("/user/{user_id}", response_model=list[PayslipResponse])
async def for_user(
    user_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    require_organisation(ctx)
    try:
        payslips = await payslips_for_user(db, ctx, user_id)
    except ServiceError as e:
        raise_http(e)
    return [payslip_response(p) for p in payslips]


@router.get("/{payslip_id}/document", response_model=PayslipDocumentResponse)
async def document(
    payslip_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage_service),
):
    """A time-limited download link for the payslip document."""
    require_organisation(ctx)
    try:
        url = await get_document_url(db, ctx, payslip_id, storage)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return PayslipDocumentResponse(url=url)


@router.get("/{payslip_id}", response_model=PayslipResponse)
async def get_one(
    payslip_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    require_organisation(ctx)
    try:
        payslip = await get_payslip(db, ctx, payslip_id)
    except ServiceError as e:
        raise_http(e)
    return payslip_response(payslip)


@router.patch("/{payslip_id}", response_model=PayslipResponse)
async def update(
    payslip_id: int,
    body: PayslipUpdate,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        payslip = await update_payslip(db, payslip_id, body, org_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return payslip_response(payslip)


@router.delete("/{payslip_id}")
async def delete(
    payslip_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        await delete_payslip(db, payslip_id, org_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return {"message": "Payslip deleted"}
