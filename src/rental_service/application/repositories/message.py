from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from rental_service.domain.entities.message import Message
from rental_service.domain.value_objects.thread import ThreadKey


class MessageReader(Protocol):
    async def list_thread(self, key: ThreadKey) -> list[Message]:
        """Both directions of the thread, oldest first, ties in insertion order."""
        ...

    async def latest_created_at(self, key: ThreadKey) -> datetime | None: ...


class MessageWriter(Protocol):
    async def lock_thread(self, key: ThreadKey) -> None:
        """Serialize appends to one thread until the transaction ends."""
        ...

    async def append(self, message: Message) -> Message: ...

    async def mark_delivered(self, message_id: UUID) -> None: ...
