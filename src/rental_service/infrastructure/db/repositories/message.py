from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from rental_service.domain.entities.message import Message
from rental_service.domain.value_objects.thread import ThreadKey
from rental_service.infrastructure.db.mappers import message as mapper
from rental_service.infrastructure.db.models.message import MessageModel


def _thread_clause(key: ThreadKey):
    a, b = key.participants()
    return and_(
        MessageModel.property_id == key.property_id,
        or_(
            and_(MessageModel.sender_id == a, MessageModel.receiver_id == b),
            and_(MessageModel.sender_id == b, MessageModel.receiver_id == a),
        ),
    )


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_thread(self, key: ThreadKey) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(_thread_clause(key))
            .order_by(MessageModel.created_at.asc(), MessageModel.seq.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def latest_created_at(self, key: ThreadKey) -> datetime | None:
        stmt = select(func.max(MessageModel.created_at)).where(_thread_clause(key))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def lock_thread(self, key: ThreadKey) -> None:
        # Transaction-scoped; released on commit/rollback.
        await self._session.execute(
            select(func.pg_advisory_xact_lock(func.hashtext(str(key))))
        )

    async def append(self, message: Message) -> Message:
        stmt = (
            pg_insert(MessageModel)
            .values(**mapper.entity_to_values(message))
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def mark_delivered(self, message_id: UUID) -> None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(delivered=True)
        )
        await self._session.execute(stmt)
