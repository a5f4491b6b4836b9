"""Request/response schemas for leave endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from loro.pagination import PageMeta

LeaveType = Literal[
    "annual",
    "sick",
    "maternity",
    "paternity",
    "family_responsibility",
    "study",
    "unpaid",
    "compassionate",
    "other",
]
LeaveStatus = Literal["pending", "approved", "rejected", "cancelled_by_user", "cancelled_by_admin"]
HalfDayPeriod = Literal["first_half", "second_half"]


class LeaveUserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    email: str
    photo_url: str | None = None


class LeaveCreate(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    duration: float | None = Field(None, ge=0)
    motivation: str | None = None
    is_half_day: bool = False
    half_day_period: HalfDayPeriod | None = None
    attachments: list[str] = Field(default_factory=list)
    is_public_holiday: bool = False
    is_paid: bool = True
    paid_amount: Decimal | None = None
    tags: list[str] = Field(default_factory=list)
    delegated_to_id: int | None = None

    @model_validator(mode="after")
    def _date_order(self) -> LeaveCreate:
        if self.end_date < self.start_date:
            msg = "end_date must be on or after start_date"
            raise ValueError(msg)
        return self


class LeaveUpdate(BaseModel):
    leave_type: LeaveType | None = None
    start_date: date | None = None
    end_date: date | None = None
    duration: float | None = Field(None, ge=0)
    motivation: str | None = None
    is_half_day: bool | None = None
    half_day_period: HalfDayPeriod | None = None
    attachments: list[str] | None = None
    comments: str | None = None
    is_paid: bool | None = None
    paid_amount: Decimal | None = None
    tags: list[str] | None = None
    delegated_to_id: int | None = None


class LeaveReject(BaseModel):
    rejection_reason: str | None = None


class LeaveCancel(BaseModel):
    cancellation_reason: str | None = None


class LeaveApprove(BaseModel):
    comments: str | None = None


class LeaveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    leave_type: str
    start_date: date
    end_date: date
    duration: float
    motivation: str | None = None
    status: str
    approved_by_id: int | None = None
    comments: str | None = None
    is_half_day: bool
    half_day_period: str | None = None
    attachments: list[str] = []
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    is_public_holiday: bool
    is_paid: bool
    paid_amount: Decimal | None = None
    tags: list[str] = []
    delegated_to_id: int | None = None
    organisation_id: int
    branch_id: int | None = None
    owner: LeaveUserSummary | None = None
    approved_by: LeaveUserSummary | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class LeaveListResponse(BaseModel):
    data: list[LeaveResponse]
    meta: PageMeta
    message: str = "Success"


class LeaveCreateResponse(BaseModel):
    message: str
    leave: LeaveResponse
