from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from rental_service.application.dto.property import PropertyFilterDTO
from rental_service.domain.entities.property import Property


class PropertyReader(Protocol):
    async def get_by_id(self, property_id: UUID) -> Property | None: ...

    async def search(self, filters: PropertyFilterDTO) -> list[Property]:
        """Available listings matching the filters, newest first."""
        ...

    async def list_featured(self, limit: int) -> list[Property]: ...

    async def list_for_owner(self, owner_id: UUID) -> list[Property]: ...


class PropertyWriter(Protocol):
    async def create(self, prop: Property) -> Property: ...

    async def update(self, property_id: UUID, values: dict[str, Any]) -> Property | None: ...

    async def delete(self, property_id: UUID) -> None: ...
