"""Organisation and branch endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.dependencies import require_roles
from loro.database import get_session
from loro.errors import ServiceError, raise_http
from loro.organisations.schemas import (
    BranchCreate,
    BranchResponse,
    OrganisationCreate,
    OrganisationResponse,
)
from loro.organisations.service import create_branch, create_organisation, get_organisation

router = APIRouter(prefix="/api/v1/organisations", tags=["Organisations"])

_ADMINS = ("owner", "admin", "developer")


def _ensure_same_org(ctx: RequestContext, organisation_id: int) -> None:
    """Developers may act across organisations; everyone else only on their own."""
    if ctx.role.lower() != "developer" and ctx.organisation_id != organisation_id:
        raise HTTPException(status_code=403, detail="You do not have permission to access this resource")


@router.post("", response_model=OrganisationResponse, status_code=201)
async def create(
    body: OrganisationCreate,
    _ctx: RequestContext = Depends(require_roles("developer")),
    db: AsyncSession = Depends(get_session),
):
    """Create an organisation."""
    org = await create_organisation(db, body)
    await db.commit()
    return OrganisationResponse.model_validate(org)


@router.get("/{organisation_id}", response_model=OrganisationResponse)
async def get_one(
    organisation_id: int,
    ctx: RequestContext = Depends(require_roles(*_ADMINS)),
    db: AsyncSession = Depends(get_session),
):
    _ensure_same_org(ctx, organisation_id)
    try:
        org = await get_organisation(db, organisation_id)
    except ServiceError as e:
        raise_http(e)
    return OrganisationResponse.model_validate(org)


@router.post("/{organisation_id}/branches", response_model=BranchResponse, status_code=201)
async def add_branch(
    organisation_id: int,
    body: BranchCreate,
    ctx: RequestContext = Depends(require_roles(*_ADMINS)),
    db: AsyncSession = Depends(get_session),
):
    """Add a branch to an organisation."""
    _ensure_same_org(ctx, organisation_id)
    try:
        branch = await create_branch(db, organisation_id, body)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return BranchResponse.model_validate(branch)
