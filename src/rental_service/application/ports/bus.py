from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID


class ChatRelay(Protocol):
    """Hands a push to other worker processes when the receiver isn't local."""

    async def publish(self, receiver_id: UUID, event_type: str, data: Any) -> None: ...
