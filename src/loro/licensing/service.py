"""License issuing and validation."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.db.base import as_utc
from loro.db.models import License, Organisation
from loro.errors import NotFoundError, ValidationError
from loro.licensing.features import PLANS

logger = logging.getLogger(__name__)

GRACE_PERIOD_DAYS = 15
LICENSE_CACHE_TTL_SECONDS = 300
LICENSE_STATUSES = ("active", "trial", "grace_period", "suspended", "expired")


async def issue_license(
    db: AsyncSession,
    organisation_id: int,
    plan: str,
    *,
    status: str = "active",
    valid_days: int | None = 365,
    max_users: int = 10,
) -> License:
    """Create a license for an organisation."""
    if plan not in PLANS:
        msg = f"Unknown plan: {plan}"
        raise ValidationError(msg)
    if status not in LICENSE_STATUSES:
        msg = f"Unknown license status: {status}"
        raise ValidationError(msg)

    org = await db.get(Organisation, organisation_id)
    if org is None or org.is_deleted:
        msg = "Organisation not found"
        raise NotFoundError(msg)

    now = datetime.now(timezone.utc)
    lic = License(
        organisation_id=organisation_id,
        plan=plan,
        status=status,
        valid_from=now,
        valid_until=now + timedelta(days=valid_days) if valid_days is not None else None,
        max_users=max_users,
    )
    db.add(lic)
    await db.flush()
    return lic


async def get_license(db: AsyncSession, license_id: str) -> License:
    lic = await db.get(License, license_id)
    if lic is None:
        msg = f"License {license_id} not found"
        raise NotFoundError(msg)
    return lic


async def get_current_license(db: AsyncSession, organisation_id: int) -> License | None:
    """Most recently issued license of an organisation that is not expired or suspended."""
    result = await db.execute(
        select(License)
        .where(
            License.organisation_id == organisation_id,
            License.status.in_(("active", "trial", "grace_period")),
        )
        .order_by(License.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def evaluate_license(lic: License, now: datetime | None = None) -> bool:
    """Decide validity and move the license into grace or expiry if due.

    Suspended licenses are never valid. Past ``valid_until`` a license keeps
    working for GRACE_PERIOD_DAYS before it expires. A trial needs an end
    date. Licenses without ``valid_until`` are perpetual.
    """
    now = now or datetime.now(timezone.utc)
    lic.last_validated = now

    if lic.status == "suspended":
        return False
    if lic.valid_until is not None and now > as_utc(lic.valid_until):
        if now <= as_utc(lic.valid_until) + timedelta(days=GRACE_PERIOD_DAYS):
            lic.status = "grace_period"
            return True
        lic.status = "expired"
        return False
    if lic.status == "trial":
        return lic.valid_until is not None
    return lic.status in ("active", "grace_period")


async def validate_license(db: AsyncSession, redis: object | None, license_id: str) -> bool:
    """Validate a license, caching the verdict in Redis when available."""
    cache_key = f"license:valid:{license_id}"
    if redis is not None:
        try:
            cached = await redis.get(cache_key)  # type: ignore[union-attr]
            if cached is not None:
                return cached == "1"
        except Exception:
            logger.warning("License cache read failed for %s", license_id, exc_info=True)

    lic = await db.get(License, license_id)
    if lic is None:
        logger.warning("License %s not found during validation", license_id)
        is_valid = False
    else:
        is_valid = evaluate_license(lic)
        await db.commit()

    if redis is not None:
        try:
            await redis.set(cache_key, "1" if is_valid else "0", ex=LICENSE_CACHE_TTL_SECONDS)  # type: ignore[union-attr]
        except Exception:
            logger.warning("License cache write failed for %s", license_id, exc_info=True)

    return is_valid
