"""Request/response schemas for shop endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ProductStatus = Literal["active", "inactive", "special", "new", "hotdeals", "bestseller"]
QuotationStatus = Literal[
    "draft",
    "pending_internal",
    "pending_client",
    "negotiation",
    "approved",
    "rejected",
    "sourcing",
    "packing",
    "in_fulfillment",
    "paid",
    "outfordelivery",
    "delivered",
    "returned",
    "completed",
    "cancelled",
    "pending",
    "inprogress",
]


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    sku: str | None = Field(None, max_length=64)
    category: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(..., ge=0)
    sale_price: Decimal | None = Field(None, ge=0)
    is_on_promotion: bool = False
    stock_quantity: int = Field(0, ge=0)
    status: ProductStatus = "active"
    image_url: str | None = None
    reseller_id: int | None = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    sku: str
    category: str
    price: Decimal
    sale_price: Decimal | None = None
    is_on_promotion: bool
    stock_quantity: int
    status: str
    image_url: str | None = None
    reseller_id: int | None = None
    organisation_id: int
    branch_id: int | None = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    message: str = "Success"


class CategoriesResponse(BaseModel):
    categories: list[str]
    message: str = "Success"


class QuotationItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    notes: str | None = None


class QuotationCreate(BaseModel):
    client_id: int
    items: list[QuotationItemCreate]
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    notes: str | None = None
    promo_code: str | None = Field(None, max_length=32)

    @field_validator("items")
    @classmethod
    def _items_required(cls, v: list[QuotationItemCreate]) -> list[QuotationItemCreate]:
        if not v:
            msg = "Quotation items are required"
            raise ValueError(msg)
        return v


class QuotationStatusUpdate(BaseModel):
    status: QuotationStatus


class QuotationClient(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str | None = None


class QuotationPlacedBy(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    email: str


class QuotationItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    notes: str | None = None
    product: ProductResponse | None = None


class QuotationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quotation_number: str
    title: str | None = None
    description: str | None = None
    notes: str | None = None
    total_amount: Decimal
    total_items: int
    status: str
    quotation_date: datetime
    promo_code: str | None = None
    currency: str
    valid_until: datetime | None = None
    review_url: str | None = None
    is_converted: bool
    placed_by_id: int
    client_id: int
    organisation_id: int
    branch_id: int | None = None
    placed_by: QuotationPlacedBy | None = None
    client: QuotationClient | None = None
    items: list[QuotationItemResponse] = []
    created_at: datetime
    updated_at: datetime


class QuotationStatusResponse(BaseModel):
    message: str
    quotation: QuotationResponse
