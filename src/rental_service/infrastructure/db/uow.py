from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator, Self

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rental_service.application.exceptions import PersistenceError
from rental_service.infrastructure.db.repositories.contact import ContactWriterRepo
from rental_service.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from rental_service.infrastructure.db.repositories.property import (
    PropertyReaderRepo,
    PropertyWriterRepo,
)
from rental_service.infrastructure.db.repositories.user import UserReaderRepo, UserWriterRepo
from rental_service.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.users = UserReaderRepo(session)
        self.users_w = UserWriterRepo(session)
        self.properties = PropertyReaderRepo(session)
        self.properties_w = PropertyWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.contacts_w = ContactWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@asynccontextmanager
async def open_uow() -> AsyncIterator[SqlAlchemyUoW]:
    """Session-per-block unit of work; driver failures surface as PersistenceError."""
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        except (SQLAlchemyError, OSError) as exc:
            # Closing the session rolls the transaction back.
            logger.warning("Unit of work failed: %s", exc)
            raise PersistenceError("Storage unavailable") from exc
