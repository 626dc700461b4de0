from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_service.domain.entities.user import User
from rental_service.infrastructure.db.mappers import user as mapper
from rental_service.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def get_many(self, user_ids: list[UUID]) -> dict[UUID, User]:
        if not user_ids:
            return {}
        stmt = select(UserModel).where(UserModel.id.in_(set(user_ids)))
        result = await self._session.execute(stmt)
        return {m.id: mapper.model_to_entity(m) for m in result.scalars().all()}


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: User) -> User:
        model = mapper.entity_to_model(user)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update(self, user_id: UUID, values: dict[str, Any]) -> User | None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(**values)
            .returning(UserModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None
