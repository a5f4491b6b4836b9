"""Request/response schemas for user endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

AccessLevel = Literal[
    "owner",
    "admin",
    "manager",
    "supervisor",
    "developer",
    "support",
    "user",
    "member",
    "technician",
    "client",
]


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=64)
    surname: str = Field("", max_length=64)
    username: str | None = Field(None, max_length=64)
    phone: str | None = Field(None, max_length=32)
    photo_url: str | None = None
    role: AccessLevel = "user"
    branch_id: int | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    surname: str
    username: str | None = None
    phone: str | None = None
    photo_url: str | None = None
    role: str
    organisation_id: int
    branch_id: int | None = None
    is_active: bool
    created_at: datetime
    last_login: datetime | None = None
