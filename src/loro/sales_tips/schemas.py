"""Response schemas for sales tip endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SalesTipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    category: str
    order: int


class BroadcastResponse(BaseModel):
    message: str
    tip_id: int
    total_users: int
    notifications_sent: int
