"""Shop API endpoints: /api/v1/shop/*."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import STAFF_ROLES, WORKFORCE_ROLES, RequestContext
from loro.auth.dependencies import enterprise_only, require_organisation, require_roles
from loro.database import get_session
from loro.dependencies import get_redis_dep
from loro.errors import ServiceError, raise_http
from loro.rewards.events import dispatch
from loro.shop.schemas import (
    CategoriesResponse,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    QuotationCreate,
    QuotationResponse,
    QuotationStatus,
    QuotationStatusResponse,
    QuotationStatusUpdate,
)
from loro.shop.service import (
    create_product,
    create_quotation,
    email_quotation_to_client,
    get_quotation,
    list_categories,
    list_products,
    list_quotations,
    list_specials,
    publish_quotation_event,
    send_to_client,
    update_quotation_status,
)

logger = structlog.get_logger()

router = APIRouter(
    prefix="/api/v1/shop",
    tags=["Shop"],
    dependencies=[Depends(enterprise_only("shop"))],
)

_SHOPPERS = (*WORKFORCE_ROLES, "client")


@router.post("/products", response_model=ProductResponse, status_code=201)
async def add_product(
    body: ProductCreate,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        product = await create_product(db, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return ProductResponse.model_validate(product)


@router.get("/products", response_model=ProductListResponse)
async def products(
    category: str | None = Query(None),
    ctx: RequestContext = Depends(require_roles(*_SHOPPERS)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    rows = await list_products(db, org_id, ctx.branch_id, category=category)
    return ProductListResponse(products=[ProductResponse.model_validate(p) for p in rows])


@router.get("/categories", response_model=CategoriesResponse)
async def categories(
    ctx: RequestContext = Depends(require_roles(*_SHOPPERS)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    return CategoriesResponse(categories=await list_categories(db, org_id, ctx.branch_id))


@router.get("/specials", response_model=ProductListResponse)
async def specials(
    ctx: RequestContext = Depends(require_roles(*_SHOPPERS)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    rows = await list_specials(db, org_id, ctx.branch_id)
    return ProductListResponse(products=[ProductResponse.model_validate(p) for p in rows])


@router.post("/quotation", response_model=QuotationResponse, status_code=201)
async def checkout(
    body: QuotationCreate,
    ctx: RequestContext = Depends(require_roles(*_SHOPPERS)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Create a draft quotation priced from the catalogue."""
    org_id = require_organisation(ctx)
    try:
        quotation = await create_quotation(db, body, ctx.user_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = QuotationResponse.model_validate(quotation)
    await publish_quotation_event(redis, "quotation:new", quotation, placed_by_id=ctx.user_id)
    logger.info("quotation_created", quotation_id=response.id, total=str(response.total_amount))
    return response


@router.get("/quotations", response_model=list[QuotationResponse])
async def quotations(
    status: QuotationStatus | None = Query(None),
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    rows = await list_quotations(db, org_id, ctx.branch_id, status=status)
    return [QuotationResponse.model_validate(q) for q in rows]


@router.get("/quotations/user/{user_id}", response_model=list[QuotationResponse])
async def quotations_for_user(
    user_id: int,
    ctx: RequestContext = Depends(require_roles(*_SHOPPERS)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    rows = await list_quotations(db, org_id, ctx.branch_id, placed_by_id=user_id)
    return [QuotationResponse.model_validate(q) for q in rows]


@router.get("/quotation/{quotation_id}", response_model=QuotationResponse)
async def quotation_detail(
    quotation_id: int,
    ctx: RequestContext = Depends(require_roles(*_SHOPPERS)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        quotation = await get_quotation(db, quotation_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return QuotationResponse.model_validate(quotation)


@router.patch("/quotation/{quotation_id}/status", response_model=QuotationStatusResponse)
async def change_status(
    quotation_id: int,
    body: QuotationStatusUpdate,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Advance a quotation. Approval also rewards the sales rep and refreshes analytics."""
    org_id = require_organisation(ctx)
    try:
        quotation, previous = await update_quotation_status(db, quotation_id, body.status, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = QuotationResponse.model_validate(quotation)

    await publish_quotation_event(redis, "quotation:status-changed", quotation, previous_status=previous)
    if body.status == "approved":
        await publish_quotation_event(redis, "analytics:update", quotation)
        await dispatch(db, "quotation.approved", {
            "user_id": response.placed_by_id,
            "quotation_id": response.id,
            "organisation_id": response.organisation_id,
            "branch_id": response.branch_id,
        }, redis=redis)

    return QuotationStatusResponse(message=f"Quotation status updated to {body.status}.", quotation=response)


@router.post("/quotation/{quotation_id}/send-to-client", response_model=QuotationStatusResponse)
async def send_quotation(
    quotation_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Email the review link to the client and wait for their response."""
    org_id = require_organisation(ctx)
    try:
        quotation, previous = await send_to_client(db, quotation_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = QuotationResponse.model_validate(quotation)
    await email_quotation_to_client(quotation)
    await publish_quotation_event(redis, "quotation:status-changed", quotation, previous_status=previous)
    return QuotationStatusResponse(message="Quotation sent to client for review.", quotation=response)
