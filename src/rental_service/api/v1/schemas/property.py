from __future__ import annotations

from datetime import datetime
from uuid import UUID

from rental_service.api.v1.schemas.common import CamelModel


class PropertyResponse(CamelModel):
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
    images: list[str]
    featured: bool
    available: bool
    owner_id: UUID
    created_at: datetime
