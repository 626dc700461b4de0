from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_service.application.dto.property import PropertyFilterDTO
from rental_service.domain.entities.property import Property
from rental_service.infrastructure.db.mappers import property as mapper
from rental_service.infrastructure.db.models.property import PropertyModel


class PropertyReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, property_id: UUID) -> Property | None:
        result = await self._session.get(PropertyModel, property_id)
        return mapper.model_to_entity(result) if result else None

    async def search(self, filters: PropertyFilterDTO) -> list[Property]:
        stmt = select(PropertyModel).where(PropertyModel.available.is_(True))
        if filters.location:
            stmt = stmt.where(PropertyModel.city.icontains(filters.location, autoescape=True))
        if filters.type:
            stmt = stmt.where(PropertyModel.type == filters.type.value)
        if filters.min_price is not None:
            stmt = stmt.where(PropertyModel.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(PropertyModel.price <= filters.max_price)
        if filters.bedrooms is not None:
            stmt = stmt.where(PropertyModel.bedrooms >= filters.bedrooms)
        stmt = stmt.order_by(PropertyModel.created_at.desc(), PropertyModel.id)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_featured(self, limit: int) -> list[Property]:
        stmt = (
            select(PropertyModel)
            .where(PropertyModel.featured.is_(True), PropertyModel.available.is_(True))
            .order_by(PropertyModel.created_at.desc(), PropertyModel.id)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_for_owner(self, owner_id: UUID) -> list[Property]:
        stmt = (
            select(PropertyModel)
            .where(PropertyModel.owner_id == owner_id)
            .order_by(PropertyModel.created_at.desc(), PropertyModel.id)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class PropertyWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, prop: Property) -> Property:
        model = mapper.entity_to_model(prop)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update(self, property_id: UUID, values: dict[str, Any]) -> Property | None:
        stmt = (
            update(PropertyModel)
            .where(PropertyModel.id == property_id)
            .values(**values)
            .returning(PropertyModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def delete(self, property_id: UUID) -> None:
        await self._session.execute(
            delete(PropertyModel).where(PropertyModel.id == property_id)
        )
