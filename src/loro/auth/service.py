"""Authentication service: credential checks and token issuing."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.jwt import create_access_token, create_refresh_token
from loro.auth.password import verify_password
from loro.config import get_settings
from loro.db.base import as_utc
from loro.db.models import User
from loro.licensing.service import get_current_license
from loro.rewards.events import dispatch
from loro.users.service import get_user_by_email

logger = logging.getLogger(__name__)


async def authenticate_user(db: AsyncSession, email: str, password: str) -> tuple[User, bool]:
    """
    Authenticate a user with email + password.

    Returns the user and whether this is their first sign-in of the UTC day.

    Raises:
        ValueError: If credentials are invalid.
        PermissionError: If the account is inactive or deleted.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash or ""):
        msg = "Invalid email or password"
        raise ValueError(msg)

    if user.is_deleted or not user.is_active:
        msg = "Account is inactive"
        raise PermissionError(msg)

    now = datetime.now(timezone.utc)
    first_today = user.last_login is None or as_utc(user.last_login).date() < now.date()
    user.last_login = now
    await db.flush()
    return user, first_today


async def award_daily_login(db: AsyncSession, user: User, redis: object | None = None) -> None:
    """Grant the daily login XP. Failures are logged, never raised."""
    result = await dispatch(db, "user.login", {
        "user_id": user.id,
        "organisation_id": user.organisation_id,
        "branch_id": user.branch_id,
    }, redis=redis)
    if result is not None and result["rewards"] is None:
        logger.warning("Daily login XP for user %s not awarded: %s", user.id, result["message"])


async def issue_tokens(db: AsyncSession, user: User) -> dict[str, object]:
    """Access + refresh tokens carrying the user's tenancy and license claims."""
    settings = get_settings()
    lic = await get_current_license(db, user.organisation_id)
    access_token = create_access_token(
        user.id,
        user.role,
        user.organisation_id,
        user.branch_id,
        license_id=lic.id if lic else None,
        license_plan=lic.plan if lic else None,
    )
    return {
        "access_token": access_token,
        "refresh_token": create_refresh_token(user.id, token_id=str(uuid.uuid4())),
        "expires_in": settings.jwt_access_token_expire_minutes * 60,
        "license_plan": lic.plan if lic else None,
    }
