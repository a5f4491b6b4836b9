"""FastAPI guard dependencies: authentication, license, role and feature checks.

Each guard is evaluated per request. Authentication failures are 401,
authorization failures (role or plan) are 403.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import jwt
from fastapi import Depends, Header, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.jwt import verify_token
from loro.database import get_session
from loro.db.models import User
from loro.dependencies import get_redis_dep
from loro.licensing.features import missing_features, module_feature
from loro.licensing.service import validate_license

_bearer = HTTPBearer(auto_error=False)


async def get_current_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    token_header: str | None = Header(None, alias="token"),
) -> RequestContext:
    """Decode the bearer token (or ``token`` header) into a RequestContext."""
    token = credentials.credentials if credentials else token_header
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")

    try:
        payload = verify_token(token, expected_type="access")
        ctx = RequestContext.from_claims(payload)
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=401, detail="Invalid token claims") from e

    request.state.context = ctx
    return ctx


async def get_licensed_context(
    request: Request,
    ctx: RequestContext = Depends(get_current_context),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
) -> RequestContext:
    """Validate the organisation's license once per request."""
    if ctx.organisation_id is None or not ctx.license_id:
        return ctx
    if getattr(request.state, "license_validated", False):
        return ctx

    if not await validate_license(db, redis, ctx.license_id):
        raise HTTPException(status_code=401, detail="Your organization's license has expired")

    request.state.license_validated = True
    return ctx


def require_roles(*roles: str) -> Callable[..., Awaitable[RequestContext]]:
    """Allow only callers whose role is in ``roles`` (case-insensitive)."""
    allowed = {r.lower() for r in roles}

    async def _check(ctx: RequestContext = Depends(get_licensed_context)) -> RequestContext:
        if not ctx.role or ctx.role.lower() not in allowed:
            raise HTTPException(status_code=403, detail="You do not have permission to access this resource")
        return ctx

    return _check


def require_feature(*features: str) -> Callable[..., Awaitable[RequestContext]]:
    """Allow only callers whose license plan grants every feature."""

    async def _check(ctx: RequestContext = Depends(get_licensed_context)) -> RequestContext:
        if not ctx.license_plan:
            raise HTTPException(status_code=403, detail="No license plan found for your organization")
        missing = missing_features(ctx.license_plan, features)
        if missing:
            raise HTTPException(
                status_code=403,
                detail=f"Your current plan does not include: {', '.join(missing)}",
            )
        return ctx

    return _check


def enterprise_only(module: str) -> Callable[..., Awaitable[RequestContext]]:
    """Gate a whole module router on ``<module>.access``."""
    return require_feature(module_feature(module))


async def get_current_user(
    ctx: RequestContext = Depends(get_licensed_context),
    db: AsyncSession = Depends(get_session),
) -> User:
    """Load the calling user. 401 if the account no longer exists, 403 if disabled."""
    user = await db.get(User, ctx.user_id)
    if user is None or user.is_deleted:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is inactive")
    return user


def require_organisation(ctx: RequestContext) -> int:
    """The caller's organisation id; 400 when the token carries none."""
    if ctx.organisation_id is None:
        raise HTTPException(status_code=400, detail="Organization ID is required")
    return ctx.organisation_id
