"""User management router: /api/v1/users/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.dependencies import get_current_user, require_roles
from loro.database import get_session
from loro.db.models import User
from loro.errors import ServiceError, raise_http
from loro.users.schemas import UserCreate, UserProfile
from loro.users.service import create_user, get_org_user, list_users

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

_MANAGERS = ("owner", "admin", "manager")


@router.get("/me", response_model=UserProfile)
async def me(user: User = Depends(get_current_user)):
    """The caller's own profile."""
    return UserProfile.model_validate(user)


@router.post("", response_model=UserProfile, status_code=201)
async def create(
    body: UserCreate,
    ctx: RequestContext = Depends(require_roles(*_MANAGERS)),
    db: AsyncSession = Depends(get_session),
):
    """Create a user in the caller's organisation."""
    if ctx.organisation_id is None:
        raise HTTPException(status_code=400, detail="Organization ID is required")
    if body.role == "owner" and ctx.role.lower() != "owner":
        raise HTTPException(status_code=403, detail="Only owners can create owners")
    try:
        user = await create_user(db, ctx.organisation_id, body)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    logger.info("user_created", user_id=user.id, organisation_id=ctx.organisation_id)
    return UserProfile.model_validate(user)


@router.get("", response_model=list[UserProfile])
async def list_all(
    ctx: RequestContext = Depends(require_roles(*_MANAGERS)),
    db: AsyncSession = Depends(get_session),
):
    """Users of the caller's organisation (and branch, when scoped)."""
    users = await list_users(db, ctx.organisation_id, ctx.branch_id)
    return [UserProfile.model_validate(u) for u in users]


@router.get("/{user_id}", response_model=UserProfile)
async def get_one(
    user_id: int,
    ctx: RequestContext = Depends(require_roles(*_MANAGERS)),
    db: AsyncSession = Depends(get_session),
):
    try:
        user = await get_org_user(db, user_id, ctx.organisation_id)
    except ServiceError as e:
        raise_http(e)
    return UserProfile.model_validate(user)
