"""Request/response schemas for reseller endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ResellerStatus = Literal["active", "inactive", "suspended"]


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: str = ""


class ResellerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str = ""
    logo: str | None = None
    website: str | None = None
    status: ResellerStatus = "active"
    contact_person: str = Field(..., min_length=1, max_length=128)
    phone: str = Field(..., min_length=1, max_length=32)
    email: EmailStr
    address: Address = Field(default_factory=Address)


class ResellerUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = None
    logo: str | None = None
    website: str | None = None
    status: ResellerStatus | None = None
    contact_person: str | None = Field(None, min_length=1, max_length=128)
    phone: str | None = Field(None, min_length=1, max_length=32)
    email: EmailStr | None = None
    address: Address | None = None


class ResellerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    logo: str | None = None
    website: str | None = None
    status: str
    contact_person: str
    phone: str
    email: str
    address: Address
    organisation_id: int
    branch_id: int | None = None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
