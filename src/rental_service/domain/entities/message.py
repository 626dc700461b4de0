from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from rental_service.domain.value_objects.thread import ThreadKey


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    property_id: UUID
    sender_id: UUID
    receiver_id: UUID
    body: str
    created_at: datetime
    delivered: bool = False

    @property
    def thread_key(self) -> ThreadKey:
        return ThreadKey.of(self.property_id, self.sender_id, self.receiver_id)
