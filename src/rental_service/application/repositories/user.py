from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from rental_service.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def get_many(self, user_ids: list[UUID]) -> dict[UUID, User]: ...


class UserWriter(Protocol):
    async def create(self, user: User) -> User: ...

    async def update(self, user_id: UUID, values: dict[str, Any]) -> User | None: ...
