"""Request/response schemas for asset endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AssetOwner(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    email: str
    photo_url: str | None = None


class AssetBranch(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class AssetCreate(BaseModel):
    brand: str = Field(..., min_length=1, max_length=128)
    serial_number: str = Field(..., min_length=1, max_length=128)
    model_number: str = Field(..., min_length=1, max_length=128)
    purchase_date: date
    has_insurance: bool = False
    insurance_provider: str | None = Field(None, max_length=128)
    insurance_expiry_date: date | None = None
    owner_id: int

    @model_validator(mode="after")
    def _insurance_dates(self) -> AssetCreate:
        if self.insurance_expiry_date and self.insurance_expiry_date < self.purchase_date:
            msg = "insurance_expiry_date cannot be before purchase_date"
            raise ValueError(msg)
        return self


class AssetUpdate(BaseModel):
    brand: str | None = Field(None, min_length=1, max_length=128)
    serial_number: str | None = Field(None, min_length=1, max_length=128)
    model_number: str | None = Field(None, min_length=1, max_length=128)
    purchase_date: date | None = None
    has_insurance: bool | None = None
    insurance_provider: str | None = Field(None, max_length=128)
    insurance_expiry_date: date | None = None
    owner_id: int | None = None


class AssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand: str
    serial_number: str
    model_number: str
    purchase_date: date
    has_insurance: bool
    insurance_provider: str | None = None
    insurance_expiry_date: date | None = None
    is_deleted: bool
    owner_id: int
    organisation_id: int
    branch_id: int | None = None
    owner: AssetOwner | None = None
    branch: AssetBranch | None = None
    created_at: datetime
    updated_at: datetime


class AssetListResponse(BaseModel):
    assets: list[AssetResponse]
    total: int
