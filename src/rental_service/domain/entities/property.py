from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Property:
    id: UUID
    title: str
    description: str | None
    location: str
    city: str
    price: int
    type: str
    bedrooms: int
    bathrooms: int
    size: int
    owner_id: UUID
    created_at: datetime
    images: list[str] = field(default_factory=list)
    featured: bool = False
    available: bool = True
