"""Request/response schemas for licensing endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Plan = Literal["starter", "professional", "business", "enterprise"]
LicenseStatus = Literal["active", "trial", "grace_period", "suspended", "expired"]


class LicenseCreate(BaseModel):
    organisation_id: int
    plan: Plan
    status: LicenseStatus = "active"
    valid_days: int | None = Field(365, ge=1)
    max_users: int = Field(10, ge=1)


class LicenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    organisation_id: int
    plan: str
    status: str
    valid_from: datetime
    valid_until: datetime | None = None
    max_users: int


class LicenseValidationResponse(BaseModel):
    license_id: str
    valid: bool
