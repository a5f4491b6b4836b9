"""Declarative base and portable column types."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, BigInteger, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# SQLite only auto-increments INTEGER PRIMARY KEY columns.
BigIntPK = BigInteger().with_variant(Integer, "sqlite")
JSONType = JSON().with_variant(JSONB, "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def as_utc(value: datetime) -> datetime:
    """Normalize a stored timestamp to aware UTC (SQLite returns naive values)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def tenant_clause(model: Any, organisation_id: int | None, branch_id: int | None = None) -> list[Any]:
    """WHERE terms restricting ``model`` to the caller's organisation (and branch, if any)."""
    clauses = [model.organisation_id == organisation_id]
    if branch_id is not None:
        clauses.append(model.branch_id == branch_id)
    return clauses
