"""Domain model for sa_marketplace."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class Plugin:
    id: str
    name: str
    description: str | None = None
    icon: str | None = None
    category: str = "utility"
    price: int = 0
    author_id: str | None = None
    author_name: str | None = None
    downloads: int = 0
    rating: int = 0
    is_official: bool = False
    status: str = "published"
    nodes: Any = None                # workflow graph from the plugin editor (JSONB)
    created_at: datetime | None = None
