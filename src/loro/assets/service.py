"""Asset register: company equipment assigned to users, with soft delete."""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.assets.schemas import AssetCreate, AssetUpdate
from loro.db.base import tenant_clause
from loro.db.models import Asset, Branch, User
from loro.email.service import send_notification_email
from loro.errors import ConflictError, NotFoundError
from loro.users.service import get_org_user

logger = logging.getLogger(__name__)


async def _ensure_serial_free(db: AsyncSession, serial_number: str, exclude_id: int | None = None) -> None:
    stmt = select(Asset.id).where(Asset.serial_number == serial_number)
    if exclude_id is not None:
        stmt = stmt.where(Asset.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        msg = f"An asset with serial number {serial_number} already exists"
        raise ConflictError(msg)


async def _get_scoped(
    db: AsyncSession,
    asset_id: int,
    organisation_id: int | None,
    branch_id: int | None,
    *,
    include_deleted: bool = False,
) -> Asset:
    stmt = select(Asset).where(Asset.id == asset_id, *tenant_clause(Asset, organisation_id, branch_id))
    if not include_deleted:
        stmt = stmt.where(Asset.is_deleted.is_(False))
    asset = (await db.execute(stmt)).scalar_one_or_none()
    if asset is None:
        msg = "Asset not found in your organization"
        raise NotFoundError(msg)
    return asset


async def create_asset(
    db: AsyncSession,
    body: AssetCreate,
    organisation_id: int,
    branch_id: int | None = None,
) -> Asset:
    """Register an asset to a user of the organisation.

    Raises:
        NotFoundError: The owner is not in the organisation.
        ConflictError: The serial number is already registered.
    """
    await get_org_user(db, body.owner_id, organisation_id)
    await _ensure_serial_free(db, body.serial_number)

    asset = Asset(**body.model_dump(), organisation_id=organisation_id, branch_id=branch_id)
    db.add(asset)
    await db.flush()
    await db.refresh(asset)
    logger.info("Asset %s registered to user %s", asset.id, asset.owner_id)
    return asset


async def list_assets(db: AsyncSession, organisation_id: int | None, branch_id: int | None = None) -> list[Asset]:
    result = await db.execute(
        select(Asset)
        .where(Asset.is_deleted.is_(False), *tenant_clause(Asset, organisation_id, branch_id))
        .order_by(Asset.created_at.desc(), Asset.id.desc())
    )
    return list(result.scalars().all())


async def get_asset(db: AsyncSession, asset_id: int, organisation_id: int | None, branch_id: int | None = None) -> Asset:
    return await _get_scoped(db, asset_id, organisation_id, branch_id)


async def search_assets(
    db: AsyncSession,
    query: str,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> list[Asset]:
    """Case-insensitive match on brand, serial, model, owner name or branch name."""
    pattern = f"%{query.strip()}%"
    result = await db.execute(
        select(Asset)
        .join(User, Asset.owner_id == User.id)
        .outerjoin(Branch, Asset.branch_id == Branch.id)
        .where(
            Asset.is_deleted.is_(False),
            *tenant_clause(Asset, organisation_id, branch_id),
            or_(
                Asset.brand.ilike(pattern),
                Asset.serial_number.ilike(pattern),
                Asset.model_number.ilike(pattern),
                User.name.ilike(pattern),
                User.surname.ilike(pattern),
                Branch.name.ilike(pattern),
            ),
        )
        .order_by(Asset.id)
    )
    return list(result.scalars().unique().all())


async def assets_for_user(
    db: AsyncSession,
    user_id: int,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> list[Asset]:
    await get_org_user(db, user_id, organisation_id)
    result = await db.execute(
        select(Asset)
        .where(
            Asset.owner_id == user_id,
            Asset.is_deleted.is_(False),
            *tenant_clause(Asset, organisation_id, branch_id),
        )
        .order_by(Asset.id)
    )
    return list(result.scalars().all())


async def update_asset(
    db: AsyncSession,
    asset_id: int,
    body: AssetUpdate,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> tuple[Asset, bool]:
    """Apply a partial update. Returns the asset and whether it changed hands."""
    asset = await _get_scoped(db, asset_id, organisation_id, branch_id)
    changes = body.model_dump(exclude_unset=True)

    if "serial_number" in changes and changes["serial_number"] != asset.serial_number:
        await _ensure_serial_free(db, changes["serial_number"], exclude_id=asset.id)

    reassigned = False
    if changes.get("owner_id") is not None and changes["owner_id"] != asset.owner_id:
        await get_org_user(db, changes["owner_id"], organisation_id)
        reassigned = True

    for key, value in changes.items():
        if value is None and key in ("brand", "serial_number", "model_number", "purchase_date", "owner_id"):
            continue
        setattr(asset, key, value)

    await db.flush()
    await db.refresh(asset)
    return asset, reassigned


async def delete_asset(db: AsyncSession, asset_id: int, organisation_id: int | None, branch_id: int | None = None) -> None:
    asset = await _get_scoped(db, asset_id, organisation_id, branch_id)
    asset.is_deleted = True
    await db.flush()
    logger.info("Asset %s soft-deleted", asset_id)


async def restore_asset(db: AsyncSession, asset_id: int, organisation_id: int | None, branch_id: int | None = None) -> Asset:
    asset = await _get_scoped(db, asset_id, organisation_id, branch_id, include_deleted=True)
    asset.is_deleted = False
    await db.flush()
    await db.refresh(asset)
    logger.info("Asset %s restored", asset_id)
    return asset


async def notify_owner(asset: Asset, template_name: str) -> None:
    """Email the asset owner. Best effort."""
    owner = asset.owner
    if owner is None:
        return
    sent = await send_notification_email(owner.email, template_name, {
        "name": owner.name,
        "brand": asset.brand,
        "model_number": asset.model_number,
        "serial_number": asset.serial_number,
    })
    if not sent:
        logger.warning("Asset email %s for asset %s not delivered", template_name, asset.id)
