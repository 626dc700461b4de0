from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from rental_service.domain.entities.contact import Contact
from rental_service.infrastructure.db.mappers import contact as mapper


class ContactWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, contact: Contact) -> Contact:
        model = mapper.entity_to_model(contact)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)
