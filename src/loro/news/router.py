"""News API endpoints: /api/v1/news/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import STAFF_ROLES, WORKFORCE_ROLES, RequestContext
from loro.auth.dependencies import enterprise_only, require_organisation, require_roles
from loro.database import get_session
from loro.errors import ServiceError, raise_http
from loro.news.schemas import NewsCreate, NewsResponse, NewsUpdate
from loro.news.service import create_news, delete_news, get_news, list_news, update_news

router = APIRouter(
    prefix="/api/v1/news",
    tags=["News"],
    dependencies=[Depends(enterprise_only("news"))],
)

_READERS = (*WORKFORCE_ROLES, "client")


@router.post("", response_model=NewsResponse, status_code=201)
async def create(
    body: NewsCreate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    article = await create_news(db, body, ctx.user_id, org_id, ctx.branch_id)
    await db.commit()
    return NewsResponse.model_validate(article)


@router.get("", response_model=list[NewsResponse])
async def list_all(
    ctx: RequestContext = Depends(require_roles(*_READERS)),
    db: AsyncSession = Depends(get_session),
):
    """Articles for the caller's organisation, newest first."""
    org_id = require_organisation(ctx)
    return [NewsResponse.model_validate(a) for a in await list_news(db, org_id, ctx.branch_id)]


@router.get("/{news_id}", response_model=NewsResponse)
async def get_one(
    news_id: int,
    ctx: RequestContext = Depends(require_roles(*_READERS)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        article = await get_news(db, news_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return NewsResponse.model_validate(article)


@router.patch("/{news_id}", response_model=NewsResponse)
async def update(
    news_id: int,
    body: NewsUpdate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        article = await update_news(db, news_id, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return NewsResponse.model_validate(article)


@router.delete("/{news_id}")
async def delete(
    news_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        await delete_news(db, news_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return {"message": "News article deleted"}
