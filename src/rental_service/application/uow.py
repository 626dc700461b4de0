from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from rental_service.application.repositories.contact import ContactWriter
from rental_service.application.repositories.message import MessageReader, MessageWriter
from rental_service.application.repositories.property import PropertyReader, PropertyWriter
from rental_service.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    users: UserReader
    users_w: UserWriter
    properties: PropertyReader
    properties_w: PropertyWriter
    messages: MessageReader
    messages_w: MessageWriter
    contacts_w: ContactWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


# Opens a fresh unit of work; used where no request-scoped one exists (WebSocket events).
UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
