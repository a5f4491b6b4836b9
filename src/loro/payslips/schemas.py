"""Request/response schemas for payslip endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from loro.pagination import PageMeta

PayslipStatus = Literal["generated", "sent", "viewed"]


class PayslipCreate(BaseModel):
    user_id: int
    period: str = Field(..., min_length=1, max_length=16)
    issue_date: date
    payslip_number: str | None = Field(None, max_length=64)
    gross_pay: Decimal | None = Field(None, ge=0)
    net_pay: Decimal | None = Field(None, ge=0)
    status: PayslipStatus = "generated"
    document_key: str | None = Field(None, max_length=512)
    document_url: str | None = None


class PayslipUpdate(BaseModel):
    period: str | None = Field(None, min_length=1, max_length=16)
    issue_date: date | None = None
    payslip_number: str | None = Field(None, max_length=64)
    gross_pay: Decimal | None = Field(None, ge=0)
    net_pay: Decimal | None = Field(None, ge=0)
    status: PayslipStatus | None = None
    document_key: str | None = Field(None, max_length=512)
    document_url: str | None = None


class PayslipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    period: str
    issue_date: date
    payslip_number: str | None = None
    gross_pay: Decimal | None = None
    net_pay: Decimal | None = None
    status: str
    has_document: bool = False
    organisation_id: int
    branch_id: int | None = None
    created_at: datetime
    updated_at: datetime


class PayslipListResponse(BaseModel):
    data: list[PayslipResponse]
    meta: PageMeta
    message: str = "Success"


class PayslipDocumentResponse(BaseModel):
    message: str = "Download URL generated successfully"
    url: str


def payslip_response(payslip: Any) -> PayslipResponse:
    """Serialize a payslip without leaking where its document is stored."""
    return PayslipResponse.model_validate(payslip).model_copy(
        update={"has_document": bool(payslip.document_key or payslip.document_url)}
    )
