"""News articles published to an organisation."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.db.base import tenant_clause
from loro.db.models import News
from loro.errors import NotFoundError
from loro.news.schemas import NewsCreate, NewsUpdate

_REQUIRED = ("title", "subtitle", "content", "publishing_date", "status", "category")


async def _get_scoped(db: AsyncSession, news_id: int, organisation_id: int | None, branch_id: int | None) -> News:
    result = await db.execute(
        select(News).where(
            News.id == news_id,
            News.is_deleted.is_(False),
            *tenant_clause(News, organisation_id, branch_id),
        )
    )
    article = result.scalar_one_or_none()
    if article is None:
        msg = "News article not found"
        raise NotFoundError(msg)
    return article


async def create_news(
    db: AsyncSession,
    body: NewsCreate,
    author_id: int,
    organisation_id: int,
    branch_id: int | None = None,
) -> News:
    data = body.model_dump(exclude_none=True)
    article = News(**data, author_id=author_id, organisation_id=organisation_id, branch_id=branch_id)
    db.add(article)
    await db.flush()
    await db.refresh(article)
    return article


async def list_news(db: AsyncSession, organisation_id: int | None, branch_id: int | None = None) -> list[News]:
    result = await db.execute(
        select(News)
        .where(News.is_deleted.is_(False), *tenant_clause(News, organisation_id, branch_id))
        .order_by(News.created_at.desc(), News.id.desc())
    )
    return list(result.scalars().all())


async def get_news(db: AsyncSession, news_id: int, organisation_id: int | None, branch_id: int | None = None) -> News:
    return await _get_scoped(db, news_id, organisation_id, branch_id)


async def update_news(
    db: AsyncSession,
    news_id: int,
    body: NewsUpdate,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> News:
    article = await _get_scoped(db, news_id, organisation_id, branch_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        if value is None and key in _REQUIRED:
            continue
        setattr(article, key, value)
    await db.flush()
    await db.refresh(article)
    return article


async def delete_news(db: AsyncSession, news_id: int, organisation_id: int | None, branch_id: int | None = None) -> None:
    article = await _get_scoped(db, news_id, organisation_id, branch_id)
    article.is_deleted = True
    await db.flush()
