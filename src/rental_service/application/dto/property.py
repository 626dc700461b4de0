from __future__ import annotations

from dataclasses import dataclass, field

from rental_service.domain.value_objects.enums import PropertyType


@dataclass(frozen=True, slots=True)
class PropertyFilterDTO:
    location: str | None = None
    type: PropertyType | None = None
    min_price: int | None = None
    max_price: int | None = None
    bedrooms: int | None = None


@dataclass(frozen=True, slots=True)
class PropertyDraftDTO:
    title: str
    location: str
    city: str
    price: int
    type: PropertyType
    description: str | None = None
    bedrooms: int = 0
    bathrooms: int = 0
    size: int = 0
    featured: bool = False
    images: list[str] = field(default_factory=list)
