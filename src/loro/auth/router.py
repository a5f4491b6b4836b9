"""Authentication router: /api/v1/auth/* endpoints."""

from __future__ import annotations

import jwt as pyjwt
import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.jwt import verify_token
from loro.auth.schemas import RefreshRequest, SignInRequest, TokenResponse
from loro.auth.service import authenticate_user, award_daily_login, issue_tokens
from loro.database import get_session
from loro.dependencies import get_redis_dep
from loro.users.schemas import UserProfile
from loro.users.service import get_user_by_id

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(
    body: SignInRequest,
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
) -> TokenResponse:
    """Sign in with email + password."""
    try:
        user, first_today = await authenticate_user(db, body.email, body.password)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e

    tokens = await issue_tokens(db, user)
    await db.commit()
    response = TokenResponse(**tokens, user=UserProfile.model_validate(user))

    if first_today:
        await award_daily_login(db, user, redis)

    logger.info("user_signed_in", user_id=response.user.id, organisation_id=response.user.organisation_id)
    return response


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Exchange a refresh token for a new access token."""
    try:
        payload = verify_token(body.refresh_token, expected_type="refresh")
    except pyjwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    user = await get_user_by_id(db, int(payload["sub"]))
    if user is None or user.is_deleted:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is inactive")

    tokens = await issue_tokens(db, user)
    return TokenResponse(**tokens, user=UserProfile.model_validate(user))
