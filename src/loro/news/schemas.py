"""Request/response schemas for news endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NewsStatus = Literal["active", "inactive"]
NewsCategory = Literal["news", "event", "announcement", "update", "other"]


class NewsAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    photo_url: str | None = None


class NewsCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subtitle: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    attachments: str | None = None
    cover_image: str | None = None
    thumbnail: str | None = None
    publishing_date: datetime | None = None
    status: NewsStatus = "active"
    category: NewsCategory = "news"
    share_link: str | None = None


class NewsUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    subtitle: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    attachments: str | None = None
    cover_image: str | None = None
    thumbnail: str | None = None
    publishing_date: datetime | None = None
    status: NewsStatus | None = None
    category: NewsCategory | None = None
    share_link: str | None = None


class NewsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    subtitle: str
    content: str
    attachments: str | None = None
    cover_image: str | None = None
    thumbnail: str | None = None
    publishing_date: datetime
    status: str
    category: str
    share_link: str | None = None
    author_id: int
    author: NewsAuthor | None = None
    organisation_id: int
    branch_id: int | None = None
    created_at: datetime
    updated_at: datetime
