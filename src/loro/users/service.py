"""User lookup and creation within an organisation."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.password import PasswordStrengthError, hash_password, validate_password_strength
from loro.db.models import Branch, User
from loro.errors import ConflictError, NotFoundError, ValidationError
from loro.users.schemas import UserCreate


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower().strip()))
    return result.scalar_one_or_none()


async def get_org_user(db: AsyncSession, user_id: int, organisation_id: int | None) -> User:
    """A non-deleted user of the organisation, or NotFoundError."""
    result = await db.execute(
        select(User).where(
            User.id == user_id,
            User.organisation_id == organisation_id,
            User.is_deleted.is_(False),
        )
    )
    user = result.scalar_one_or_none()
    if user is None:
        msg = "User not found in your organization"
        raise NotFoundError(msg)
    return user


async def create_user(db: AsyncSession, organisation_id: int, body: UserCreate) -> User:
    """Create a user in the organisation.

    Raises:
        ConflictError: Email already registered.
        ValidationError: Weak password or foreign branch.
    """
    if await get_user_by_email(db, body.email) is not None:
        msg = "Email already registered"
        raise ConflictError(msg)

    try:
        validate_password_strength(body.password)
    except PasswordStrengthError as e:
        raise ValidationError(str(e)) from e

    if body.branch_id is not None:
        branch = await db.get(Branch, body.branch_id)
        if branch is None or branch.organisation_id != organisation_id:
            msg = "Branch not found in your organization"
            raise ValidationError(msg)

    user = User(
        organisation_id=organisation_id,
        branch_id=body.branch_id,
        email=body.email,
        password_hash=hash_password(body.password),
        name=body.name,
        surname=body.surname,
        username=body.username,
        phone=body.phone,
        photo_url=body.photo_url,
        role=body.role,
    )
    db.add(user)
    await db.flush()
    return user


async def list_users(db: AsyncSession, organisation_id: int, branch_id: int | None = None) -> list[User]:
    stmt = select(User).where(User.organisation_id == organisation_id, User.is_deleted.is_(False))
    if branch_id is not None:
        stmt = stmt.where(User.branch_id == branch_id)
    result = await db.execute(stmt.order_by(User.id))
    return list(result.scalars().all())


async def list_active_users(db: AsyncSession, after_id: int = 0, limit: int = 100) -> list[User]:
    """Active users across all organisations, keyset-paginated by id."""
    result = await db.execute(
        select(User)
        .where(User.is_active.is_(True), User.is_deleted.is_(False), User.id > after_id)
        .order_by(User.id)
        .limit(limit)
    )
    return list(result.scalars().all())
