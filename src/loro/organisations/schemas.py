"""Request/response schemas for organisation endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class OrganisationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr | None = None
    currency: str = Field("ZAR", min_length=3, max_length=8)


class BranchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)


class BranchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    organisation_id: int
    name: str
    created_at: datetime


class OrganisationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    currency: str
    created_at: datetime
    branches: list[BranchResponse] = []
