"""Pydantic request/response schemas for sa_marketplace API."""

from typing import Any

from pydantic import BaseModel, Field

from src.sa_common.datetime_utils import iso_or_none
from src.sa_marketplace.domain.models import Plugin


class CreatePluginRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    icon: str | None = Field(default=None, max_length=2048)
    category: str = Field(default="utility", min_length=1, max_length=50)
    price: int = Field(default=0, ge=0, strict=True)
    nodes: list[dict[str, Any]] | dict[str, Any] | None = None


class PluginItem(BaseModel):
    id: str
    name: str
    description: str | None
    icon: str | None
    category: str
    price: int
    author_id: str | None
    author_name: str | None
    downloads: int
    rating: int
    is_official: bool
    status: str
    nodes: Any
    created_at: str | None

    @classmethod
    def from_domain(cls, p: Plugin) -> "PluginItem":
        return cls(
            id=p.id,
            name=p.name,
            description=p.description,
            icon=p.icon,
            category=p.category,
            price=p.price,
            author_id=p.author_id,
            author_name=p.author_name,
            downloads=p.downloads,
            rating=p.rating,
            is_official=p.is_official,
            status=p.status,
            nodes=p.nodes,
            created_at=iso_or_none(p.created_at),
        )
